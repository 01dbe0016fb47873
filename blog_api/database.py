"""Database engine and session factory setup."""

import logging
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from blog_api.models import Base, User

# Configure logging
logger = logging.getLogger(__name__)


def create_db_engine(database_url: str) -> Engine:
    """
    Create the SQLAlchemy engine for the given URL.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        Engine: Configured engine
    """
    logger.info(f"Database URL: {database_url}")
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # Needed for SQLite
    return create_engine(database_url, connect_args=connect_args)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Initialize the database by creating all tables."""
    logger.info("Initializing database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")


def seed_admin_user(session_factory: sessionmaker, settings, credentials) -> None:
    """
    Create the admin user from settings on startup.

    Only creates the user if ADMIN_USERNAME, ADMIN_EMAIL and ADMIN_PASSWORD
    are all configured and neither the username nor the email is taken.

    Args:
        session_factory: Session factory bound to the application engine
        settings: Application settings
        credentials: Credential service used to hash the admin password
    """
    logger.info("Checking admin user seed...")

    if not (settings.admin_username and settings.admin_email and settings.admin_password):
        logger.warning("Admin credentials not configured, skipping admin user seed")
        return

    db = session_factory()
    try:
        existing_user = db.query(User).filter(
            (User.username == settings.admin_username) | (User.email == settings.admin_email)
        ).first()

        if existing_user:
            logger.info(f"Admin user already exists: {settings.admin_username}")
            return

        admin_user = User(
            username=settings.admin_username,
            email=settings.admin_email,
            password_hash=credentials.hash_password(settings.admin_password),
            is_admin=True,
        )

        db.add(admin_user)
        db.commit()

        logger.info(f"Admin user created successfully: {settings.admin_username}")

    except Exception as e:
        logger.error(f"Failed to seed admin user: {e}")
        db.rollback()
        raise
    finally:
        db.close()
