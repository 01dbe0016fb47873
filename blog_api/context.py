"""Application context holding the external collaborators."""

import logging
from dataclasses import dataclass
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from blog_api.assets import AssetStore, CloudinaryAssetStore
from blog_api.auth import CredentialService
from blog_api.config import Settings
from blog_api.database import create_db_engine, create_session_factory

# Configure logging
logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Built once at process start and passed explicitly to request handlers."""

    settings: Settings
    credentials: CredentialService
    assets: AssetStore
    engine: Engine
    session_factory: sessionmaker


def build_context(settings: Settings) -> AppContext:
    """
    Wire the credential service, asset store and database from settings.

    Args:
        settings: Application settings

    Returns:
        AppContext: Ready-to-use context
    """
    engine = create_db_engine(settings.database_url)
    context = AppContext(
        settings=settings,
        credentials=CredentialService(settings.jwt_secret_key),
        assets=CloudinaryAssetStore(
            settings.cloudinary_cloud_name,
            settings.cloudinary_api_key,
            settings.cloudinary_api_secret,
        ),
        engine=engine,
        session_factory=create_session_factory(engine),
    )
    logger.info("Application context built")
    return context
