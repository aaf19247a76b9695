# app/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Application initialization and default admin creation
- db: Database configuration and connection management
- errors: User-facing error types and the internal invariant error
- principal: Per-request Anonymous / Authenticated principal
- security: Password hashing and JWT token service
- sensitive: RSA decryption of fields encrypted in transit
"""
