# app/models/__init__.py
"""
Database models module initialization.
Exports all Tortoise ORM models for convenient imports.

Models exported:
- User: account identity (name, admin flag)
- LoginData: local username/password credential
- ExternalLoginData: OAuth2 identity linked to a User
- TransferringFile: upload record pending completion or cleanup
"""
from .user import User
from .login_data import LoginData
from .external_login_data import ExternalLoginData, ExternalLoginMethod
from .transferring_file import TransferringFile, FileTransferState
