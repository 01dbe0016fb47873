"""Environment-driven settings for the blog API."""

import os
import logging
from dataclasses import dataclass
from typing import List, Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./blog_api.db"


@dataclass(frozen=True)
class Settings:
    """Runtime configuration collected once at process start."""

    jwt_secret_key: str
    database_url: str = DEFAULT_DATABASE_URL
    name_app: str = "BlogAPI"
    cors_origins: tuple = ("*",)
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None
    admin_username: Optional[str] = None
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def load_settings() -> Settings:
    """
    Build Settings from the environment.

    Returns:
        Settings: Populated settings

    Raises:
        ValueError: If JWT_SECRET_KEY is not configured
    """
    jwt_secret_key = os.getenv("JWT_SECRET_KEY")
    if not jwt_secret_key:
        raise ValueError("JWT_SECRET_KEY must be set in .env file")

    database_url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
    logger.debug(f"Database URL: {database_url}")

    return Settings(
        jwt_secret_key=jwt_secret_key,
        database_url=database_url,
        name_app=os.getenv("NAME_APP", "BlogAPI"),
        cors_origins=tuple(_split_origins(os.getenv("CORS_ORIGINS", "*"))),
        cloudinary_cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME"),
        cloudinary_api_key=os.getenv("CLOUDINARY_API_KEY"),
        cloudinary_api_secret=os.getenv("CLOUDINARY_API_SECRET"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=os.getenv("LOG_FILE") or None,
        admin_username=os.getenv("ADMIN_USERNAME") or None,
        admin_email=os.getenv("ADMIN_EMAIL") or None,
        admin_password=os.getenv("ADMIN_PASSWORD") or None,
    )
