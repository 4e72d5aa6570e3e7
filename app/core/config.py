import logging
from dotenv import load_dotenv
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings
from typing import ClassVar, List

# Load environment variables from .env file
load_dotenv(".env", override=False)
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Class to store all the settings of the Abc Hires backend."""

    # ------------------------------
    # Email - SMTP relay
    # ------------------------------
    EMAIL_USER: str = Field(default="")
    EMAIL_PASS: str = Field(default="")
    EMAIL_FROM: str = Field(default="")
    SMTP_HOST: str = Field(default="smtp.gmail.com")
    SMTP_PORT: int = Field(default=465)
    SMTP_USE_TLS: bool = Field(default=True)
    SMTP_TIMEOUT: float = Field(default=30.0)
    ADMIN_EMAIL: str = Field(default="admin@abchires.com")
    COMPANY_NAME: str = Field(default="Abc Hires")

    # Test mode: admin notices are logged instead of sent
    DISABLE_EMAILS: bool = Field(default=False)

    # ------------------------------
    # CORS
    # ------------------------------
    VITE_ORIGIN: str = Field(default="http://localhost:5173")
    CORS_ORIGINS: str = Field(default="")
    DEFAULT_ORIGINS: ClassVar[List[str]] = [
        "http://localhost:5173",
        "http://localhost:4173",
    ]

    # ------------------------------
    # Server
    # ------------------------------
    PORT: int = Field(default=5000)

    # ------------------------------
    # Uploads
    # ------------------------------
    UPLOAD_DIR: str = Field(default="uploads")
    MAX_UPLOAD_SIZE: int = Field(default=5 * 1024 * 1024)  # 5MB

    # ------------------------------
    # Rate limiting
    # ------------------------------
    RATE_LIMIT: str = Field(default="10 per 15 minutes")
    TRUST_PROXY_HEADERS: bool = Field(default=False)

    # ------------------------------
    # Computed Fields
    # ------------------------------
    @computed_field
    @property
    def allowed_origins(self) -> List[str]:
        """Front-end origin first, then the local dev servers, then any extras."""
        origins = [self.VITE_ORIGIN or "http://localhost:5173", *self.DEFAULT_ORIGINS]
        origins.extend(o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip())
        # de-duplicate, keep order
        return list(dict.fromkeys(origins))

    @computed_field
    @property
    def sender_address(self) -> str:
        return self.EMAIL_FROM or self.EMAIL_USER

    class Config:
        """Configuration for the settings class."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Instantiate the settings
settings = Settings()
