# app/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Account Service API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8102"))

    # CORS origins for frontend
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Registration
    # Public sign-up is on by default in dev; deployments usually turn it off and rely on the bootstrap admin
    allow_registration: bool = _env_flag("ALLOW_REGISTRATION", "true")

    # Default admin created on first startup (see core/bootstrap.py)
    admin_name: str = os.getenv("ADMIN_NAME", "Administrator")
    admin_username: str = os.getenv("ADMIN_USERNAME", "admin")
    admin_password: str | None = os.getenv("ADMIN_PASSWORD")

    # RSA private key (PEM) used to decrypt passwords encrypted by the frontend.
    # When unset a fresh key pair is generated on every start.
    sensitive_data_private_key_file: str | None = os.getenv("SENSITIVE_DATA_PRIVATE_KEY_FILE")

    # OAuth2 login providers (a provider is enabled only when id and secret are both set)
    oauth2_redirect_base: str = os.getenv("OAUTH2_REDIRECT_BASE", "http://localhost:8102")
    github_client_id: str | None = os.getenv("GITHUB_CLIENT_ID")
    github_client_secret: str | None = os.getenv("GITHUB_CLIENT_SECRET")
    google_client_id: str | None = os.getenv("GOOGLE_CLIENT_ID")
    google_client_secret: str | None = os.getenv("GOOGLE_CLIENT_SECRET")

    # Transferring file cleanup
    transfer_cleanup_interval_seconds: int = int(os.getenv("TRANSFER_CLEANUP_INTERVAL_SECONDS", "3600"))
    transfer_retention_hours: int = int(os.getenv("TRANSFER_RETENTION_HOURS", "24"))

settings = Settings()  # Instantiate configuration
