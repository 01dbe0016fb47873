"""User account operations: registration, login and profile updates."""

import logging
from typing import Optional, Tuple

from blog_api.assets import PROFILE_IMAGE_FOLDER, PROFILE_IMAGE_TRANSFORMATION, AssetStore, ImageUpload
from blog_api.auth import Caller, CredentialService
from blog_api.errors import AuthError, ConflictError, NotFoundError, ValidationError
from blog_api.models import User
from blog_api.store import DocumentStore

# Configure logging
logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, store: DocumentStore, credentials: CredentialService, assets: AssetStore):
        self.store = store
        self.credentials = credentials
        self.assets = assets

    def register(self, username: str, email: str, password: str) -> User:
        """
        Create a new non-admin user.

        Raises:
            ConflictError: If the email or username is already in use
        """
        logger.info(f"Registration attempt for username: {username}")

        if self.store.find_one(User, email=email):
            logger.warning(f"Registration failed: Email already exists - {email}")
            raise ConflictError("Email already in use")

        if self.store.find_one(User, username=username):
            logger.warning(f"Registration failed: Username already exists - {username}")
            raise ConflictError("Username already in use")

        user = User(
            username=username,
            email=email,
            password_hash=self.credentials.hash_password(password),
            is_admin=False,
        )
        user = self.store.save(user)

        logger.info(f"User registered successfully: {username}")
        return user

    def login(self, username: str, password: str) -> Tuple[str, User]:
        """
        Authenticate by username and password.

        Returns:
            Tuple of access token and user

        Raises:
            AuthError: If the username is unknown or the password is wrong
        """
        logger.info(f"Login attempt for username: {username}")

        user = self.store.find_one(User, username=username)
        if not user:
            logger.warning(f"Login failed: User not found - {username}")
            raise AuthError("Invalid credentials")

        if not self.credentials.verify_password(password, user.password_hash):
            logger.warning(f"Login failed: Invalid password - {username}")
            raise AuthError("Invalid credentials")

        token = self.credentials.create_access_token(user)

        logger.info(f"User logged in successfully: {username}")
        return token, user

    def get_user(self, user_id: int) -> User:
        user = self.store.find_by_id(User, user_id)
        if not user:
            logger.warning(f"User not found: {user_id}")
            raise NotFoundError("User not found")
        return user

    def update_info(self, caller: Caller, username: Optional[str], email: Optional[str]) -> User:
        """
        Change the caller's username and/or email.

        Raises:
            ValidationError: If neither field is supplied
            NotFoundError: If the caller has no user record
            ConflictError: If another user already has the username or email
        """
        username = username.strip() if username else None
        email = email.strip() if email else None
        if not username and not email:
            raise ValidationError("Username or email is required to update")

        user = self.get_user(caller.user_id)

        if username and username != user.username:
            if self.store.find_one(User, username=username):
                logger.warning(f"Update failed: Username already exists - {username}")
                raise ConflictError("Username already exists. Please choose another one.")
            user.username = username

        if email and email != user.email:
            if self.store.find_one(User, email=email):
                logger.warning(f"Update failed: Email already exists - {email}")
                raise ConflictError("Email already exists. Please choose another one.")
            user.email = email

        user = self.store.save(user)

        logger.info(f"User information updated for user {caller.user_id}")
        return user

    def update_image(self, caller: Caller, image: Optional[ImageUpload]) -> User:
        """
        Replace the caller's profile image; without a file the current URL is kept.

        Raises:
            ValidationError: If the file is not an allowed image
            NotFoundError: If the caller has no user record
            UploadError: If the asset store fails
        """
        if image is not None:
            image.validate()

        user = self.get_user(caller.user_id)

        if image is None:
            logger.info(f"No image supplied for user {caller.user_id}, keeping current image")
            return user

        user.image_url = self.assets.upload(
            image,
            folder=PROFILE_IMAGE_FOLDER,
            transformation=PROFILE_IMAGE_TRANSFORMATION,
        )
        user = self.store.save(user)

        logger.info(f"Profile image updated for user {caller.user_id}")
        return user
