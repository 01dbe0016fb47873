"""Credential service: password hashing and bearer tokens."""

import logging
from dataclasses import dataclass
from datetime import datetime
from passlib.context import CryptContext
from jose import JWTError, jwt

from blog_api.errors import AuthError

# Configure logging
logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


@dataclass(frozen=True)
class Caller:
    """Authenticated identity carried by a bearer token."""

    user_id: int
    is_admin: bool = False


class CredentialService:
    """Hashes and checks passwords, issues and verifies access tokens."""

    def __init__(self, secret_key: str, bcrypt_rounds: int = 12):
        self.secret_key = secret_key
        self.pwd_context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=bcrypt_rounds
        )

    @staticmethod
    def _truncate(password: str) -> str:
        # Bcrypt has a 72-byte limit
        password_bytes = password.encode('utf-8')[:72]
        return password_bytes.decode('utf-8', errors='ignore')

    def hash_password(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Passwords longer than 72 bytes are truncated, matching verify_password.

        Args:
            password: Plain text password

        Returns:
            str: Hashed password
        """
        logger.debug("Hashing password")
        return self.pwd_context.hash(self._truncate(password))

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        Args:
            plain_password: Plain text password
            hashed_password: Hashed password to verify against

        Returns:
            bool: True if password matches, False otherwise
        """
        logger.debug("Verifying password")
        return self.pwd_context.verify(self._truncate(plain_password), hashed_password)

    def create_access_token(self, user) -> str:
        """
        Create a JWT access token carrying the user id and admin flag.

        Args:
            user: User the token is issued for

        Returns:
            str: Encoded JWT token
        """
        to_encode = {
            "sub": str(user.id),
            "is_admin": bool(user.is_admin),
            "iat": datetime.utcnow(),
        }

        logger.info(f"Creating access token for user: {user.id}")
        return jwt.encode(to_encode, self.secret_key, algorithm=ALGORITHM)

    def verify(self, token: str) -> Caller:
        """
        Decode a bearer token into a Caller.

        Args:
            token: JWT token string

        Returns:
            Caller: Identity encoded in the token

        Raises:
            AuthError: If the token is invalid or lacks a usable subject
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
        except JWTError as e:
            logger.warning(f"Token decode error: {e}")
            raise AuthError("Could not validate credentials") from e

        subject = payload.get("sub")
        try:
            user_id = int(subject)
        except (TypeError, ValueError):
            logger.warning("Token missing subject claim")
            raise AuthError("Could not validate credentials")

        return Caller(user_id=user_id, is_admin=bool(payload.get("is_admin", False)))
