"""
haatbazar/config.py - Application configuration.

This module defines a Pydantic BaseSettings class to load configuration from environment
variables (and an optional .env file). The store itself is NOT created here: the
composition root (`haatbazar.main.create_app`) builds it from these settings and owns
its lifetime.
"""
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    store_backend: Literal["firestore", "memory"] = Field("firestore", description="firestore | memory")

    firebase_cred_file: str = "firebase_service_account.json"
    firebase_project_id: Optional[str] = None

    # Firebase credentials from environment variables (for container deployments)
    firebase_private_key_id: Optional[str] = None
    firebase_private_key: Optional[str] = None
    firebase_client_email: Optional[str] = None
    firebase_client_id: Optional[str] = None
    firebase_auth_uri: Optional[str] = None
    firebase_token_uri: Optional[str] = None
    firebase_auth_provider_x509_cert_url: Optional[str] = None
    firebase_client_x509_cert_url: Optional[str] = None

    collection_prefix: str = Field("", description="Prepended to every collection name")

    store_timeout_seconds: float = Field(5.0, gt=0)
    cart_max_retries: int = Field(3, ge=1)
    verify_product_exists: bool = True
    search_limit: int = Field(10, ge=1)

    allow_mock_tokens: bool = False
    allowed_origins: str = "*"  # Comma-separated list or '*' for all
    log_level: str = "INFO"
    debug: bool = False

    @property
    def inline_credentials(self) -> Optional[dict]:
        """Service-account dict built from env vars, or None when any piece is missing."""
        parts = [
            self.firebase_private_key_id,
            self.firebase_private_key,
            self.firebase_client_email,
            self.firebase_client_id,
            self.firebase_auth_uri,
            self.firebase_token_uri,
            self.firebase_auth_provider_x509_cert_url,
            self.firebase_client_x509_cert_url,
        ]
        if not all(parts):
            return None
        return {
            "type": "service_account",
            "project_id": self.firebase_project_id,
            "private_key_id": self.firebase_private_key_id,
            # env files usually carry the key with escaped newlines
            "private_key": self.firebase_private_key.replace("\\n", "\n"),
            "client_email": self.firebase_client_email,
            "client_id": self.firebase_client_id,
            "auth_uri": self.firebase_auth_uri,
            "token_uri": self.firebase_token_uri,
            "auth_provider_x509_cert_url": self.firebase_auth_provider_x509_cert_url,
            "client_x509_cert_url": self.firebase_client_x509_cert_url,
        }

    @property
    def origins(self) -> list:
        if not self.allowed_origins:
            return ["*"]
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


# Load settings from environment (.env file, etc.)
settings = Settings()
