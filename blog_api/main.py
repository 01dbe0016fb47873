"""Main FastAPI application for the blog API."""

import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from blog_api.config import Settings, load_settings
from blog_api.context import AppContext, build_context
from blog_api.database import init_db, seed_admin_user
from blog_api.errors import register_error_handlers
from blog_api.routers import posts, users

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging: stream handler plus an optional log file."""
    handlers = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))

    logging.basicConfig(
        level=settings.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database and seed admin user on application startup."""
    context: AppContext = app.state.context
    logger.info(f"Starting {context.settings.name_app}")
    init_db(context.engine)
    logger.info("Database initialized successfully")
    seed_admin_user(context.session_factory, context.settings, context.credentials)
    logger.info("Admin user seed completed")
    yield
    logger.info("Shutting down application...")
    context.engine.dispose()


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        context: Prebuilt application context; built from the environment when omitted

    Returns:
        FastAPI: Configured application
    """
    if context is None:
        settings = load_settings()
        configure_logging(settings)
        context = build_context(settings)

    app = FastAPI(
        title=context.settings.name_app,
        description="API for blog posts with comments and user authentication",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(context.settings.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_error_handlers(app)

    # Include routers
    app.include_router(users.router)
    app.include_router(posts.router)

    @app.get("/")
    def root():
        """Root endpoint."""
        return {
            "name": context.settings.name_app,
            "version": "1.0.0",
            "status": "running"
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
