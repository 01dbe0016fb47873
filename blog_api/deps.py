"""FastAPI dependencies resolving collaborators from the application context."""

import logging
from typing import Generator, Optional
from fastapi import Depends, Request, UploadFile
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from blog_api.assets import ImageUpload
from blog_api.auth import Caller
from blog_api.context import AppContext
from blog_api.errors import AuthError
from blog_api.ownership import OwnershipEngine
from blog_api.store import DocumentStore
from blog_api.users import UserService

# Configure logging
logger = logging.getLogger(__name__)

# HTTP Bearer for JWT authentication; missing headers are reported as AuthError
security = HTTPBearer(auto_error=False)


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_store(context: AppContext = Depends(get_context)) -> Generator[DocumentStore, None, None]:
    """
    Dependency yielding a document store bound to a fresh session.

    Yields:
        DocumentStore: Store for the duration of one request
    """
    session = context.session_factory()
    try:
        yield DocumentStore(session)
    finally:
        session.close()


def get_current_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    context: AppContext = Depends(get_context),
) -> Caller:
    """
    Dependency to get the authenticated caller from the bearer token.

    Raises:
        AuthError: If the header is missing or the token is invalid
    """
    if credentials is None:
        logger.warning("Request without bearer token")
        raise AuthError("Not authenticated")

    caller = context.credentials.verify(credentials.credentials)
    logger.info(f"Caller authenticated: {caller.user_id}")
    return caller


def image_from_upload(upload: Optional[UploadFile]) -> Optional[ImageUpload]:
    """Read a multipart upload into an ImageUpload; no file means no image."""
    if upload is None or not upload.filename:
        return None
    return ImageUpload(
        filename=upload.filename,
        content_type=upload.content_type or "",
        data=upload.file.read(),
    )


def get_ownership_engine(
    store: DocumentStore = Depends(get_store),
    context: AppContext = Depends(get_context),
) -> OwnershipEngine:
    return OwnershipEngine(store, context.assets)


def get_user_service(
    store: DocumentStore = Depends(get_store),
    context: AppContext = Depends(get_context),
) -> UserService:
    return UserService(store, context.credentials, context.assets)
