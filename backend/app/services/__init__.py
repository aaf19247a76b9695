"""
Services Module

- UserService: login, OAuth2 login, registration, current principal accessors
- OAuth2 providers: authorization-code flow against GitHub / Google
- Transferring files: stale upload lookup and cleanup
"""
from app.services.oauth2 import (
    OAuth2Identity,
    OAuth2Provider,
    oauth2_providers,
)
from app.services.user_service import (
    UserService,
    user_service,
)
from app.services.transfer_files import (
    find_all_older_than,
    purge_older_than,
    run_cleanup_loop,
)

__all__ = [
    "OAuth2Identity",
    "OAuth2Provider",
    "oauth2_providers",
    "UserService",
    "user_service",
    "find_all_older_than",
    "purge_older_than",
    "run_cleanup_loop",
]
