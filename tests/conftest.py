from __future__ import annotations

import os
from typing import Callable, Generator, List, Optional

import pytest

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from blog_api.assets import AssetStore, ImageUpload  # noqa: E402
from blog_api.auth import Caller, CredentialService  # noqa: E402
from blog_api.config import Settings  # noqa: E402
from blog_api.context import AppContext  # noqa: E402
from blog_api.database import create_db_engine, create_session_factory, init_db  # noqa: E402
from blog_api.errors import UploadError  # noqa: E402
from blog_api.main import create_app  # noqa: E402
from blog_api.models import User  # noqa: E402
from blog_api.ownership import OwnershipEngine  # noqa: E402
from blog_api.store import DocumentStore  # noqa: E402

TEST_SECRET = "test-secret-key"


class FakeAssetStore(AssetStore):
    """Records uploads in memory instead of calling Cloudinary."""

    def __init__(self) -> None:
        self.uploads: List[dict] = []
        self.fail = False

    def upload(self, image: ImageUpload, folder: str, transformation: Optional[list] = None) -> str:
        if self.fail:
            raise UploadError("Error uploading image to Cloudinary")
        self.uploads.append({"image": image, "folder": folder, "transformation": transformation})
        return f"https://assets.example.com/{folder}/{len(self.uploads)}/{image.filename}"


@pytest.fixture()
def assets() -> FakeAssetStore:
    return FakeAssetStore()


@pytest.fixture()
def context(tmp_path, assets: FakeAssetStore) -> Generator[AppContext, None, None]:
    settings = Settings(
        jwt_secret_key=TEST_SECRET,
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
    )
    engine = create_db_engine(settings.database_url)
    init_db(engine)
    yield AppContext(
        settings=settings,
        credentials=CredentialService(TEST_SECRET, bcrypt_rounds=4),
        assets=assets,
        engine=engine,
        session_factory=create_session_factory(engine),
    )
    engine.dispose()


@pytest.fixture()
def client(context: AppContext) -> Generator[TestClient, None, None]:
    with TestClient(create_app(context)) as test_client:
        yield test_client


@pytest.fixture()
def db(context: AppContext) -> Generator[Session, None, None]:
    """Create a database session for testing."""
    session = context.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def store(db: Session) -> DocumentStore:
    return DocumentStore(db)


@pytest.fixture()
def engine(store: DocumentStore, assets: FakeAssetStore) -> OwnershipEngine:
    return OwnershipEngine(store, assets)


@pytest.fixture()
def make_user(store: DocumentStore, context: AppContext) -> Callable[..., User]:
    """Factory inserting users straight into the store."""

    def _make_user(username: str, is_admin: bool = False, password: str = "password123") -> User:
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=context.credentials.hash_password(password),
            is_admin=is_admin,
        )
        return store.save(user)

    return _make_user


@pytest.fixture()
def caller_for() -> Callable[[User], Caller]:
    def _caller_for(user: User) -> Caller:
        return Caller(user_id=user.id, is_admin=bool(user.is_admin))

    return _caller_for


@pytest.fixture()
def auth_headers(context: AppContext) -> Callable[[User], dict]:
    def _auth_headers(user: User) -> dict:
        token = context.credentials.create_access_token(user)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
