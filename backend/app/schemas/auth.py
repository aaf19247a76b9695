# app/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Defines request models for login and registration.
"""
from pydantic import BaseModel

class LoginRequest(BaseModel):
    """
    Request model for user login endpoint.
    Contains credentials for authentication.
    """
    username: str  # User login name
    password: str  # Password encrypted with the key from /auth/public-key (base64)

class RegisterRequest(BaseModel):
    """
    Request model for self-service registration.
    """
    name: str  # Display name
    username: str  # Login name (must be unique)
    password: str  # Encrypted like LoginRequest.password
