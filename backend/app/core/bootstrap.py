# app/core/bootstrap.py
"""
Bootstrap module for application initialization.
Handles initial setup tasks such as creating default admin user on first startup.
"""
import logging
from app.config import settings
from app.core.errors import UsernameExists
from app.models.user import User
from app.services.user_service import user_service

logger = logging.getLogger("uvicorn.error")

async def ensure_default_admin() -> None:
    """
    If no admin exists in the database, create a default admin based on environment variables.
    Only takes effect under the following conditions:
      - Currently no user with admin=True
      - And ADMIN_PASSWORD is set (to avoid using default weak password)
    Environment variables:
      ADMIN_NAME     (default: "Administrator")
      ADMIN_USERNAME (default: "admin")
      ADMIN_PASSWORD (required, otherwise won't create)
    """
    if await User.filter(admin=True).exists():
        return  # Skip creation if admin already exists

    if not settings.admin_password:
        logger.warning("[bootstrap] No admin present, but ADMIN_PASSWORD not set -> skip creating default admin.")
        return

    # register() expects the password as the frontend sends it, i.e. encrypted with our public key
    encrypted = user_service.sensitive_data.encrypt(settings.admin_password)
    try:
        await user_service.register(settings.admin_name, settings.admin_username, encrypted, admin=True)
    except UsernameExists:
        logger.warning("[bootstrap] Username %s already taken by a non-admin user -> skip creating default admin.",
                       settings.admin_username)
        return
    logger.warning("[bootstrap] Created default admin -> username=%s", settings.admin_username)
