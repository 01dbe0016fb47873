"""Pydantic schemas for request and response validation."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, field_validator


# Auth Schemas
class UserRegister(BaseModel):
    """Schema for user registration request."""

    username: str
    email: str
    password: str

    @field_validator('username', 'email', 'password')
    @classmethod
    def not_empty(cls, v: str) -> str:
        """Validate that required fields are not empty."""
        if not v or not v.strip():
            raise ValueError('All fields are required')
        return v

    @field_validator('email')
    @classmethod
    def email_format(cls, v: str) -> str:
        """Validate that email looks like an address."""
        if '@' not in v:
            raise ValueError('Invalid email format')
        return v.strip()

    @field_validator('password')
    @classmethod
    def password_length(cls, v: str) -> str:
        """Validate minimum password length."""
        if len(v) < 8:
            raise ValueError('Password must be at least 8 characters long')
        return v


class UserLogin(BaseModel):
    """Schema for user login request."""

    username: str
    password: str

    @field_validator('username', 'password')
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError('Username and password are required')
        return v


class UserInfoUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None

    @field_validator('email')
    @classmethod
    def email_format(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and '@' not in v:
            raise ValueError('Invalid email format')
        return v


class UserOut(BaseModel):
    """Display-safe user profile; never carries the password hash."""

    id: int
    username: str
    email: str
    is_admin: bool
    image_url: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    message: str
    user: UserOut


class Token(BaseModel):
    """Schema for JWT token response."""

    access_token: str
    token_type: str
    user: UserOut


# Blog Post Schemas
class AuthorSummary(BaseModel):
    """Author identity as shown next to posts and comments."""

    id: int
    username: str
    email: str
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class CommentOut(BaseModel):
    id: str
    user_id: int
    content: str
    created_at: datetime
    updated_at: datetime
    user: Optional[AuthorSummary] = None


class PostOut(BaseModel):
    """Blog post with its embedded comments in display order."""

    id: int
    title: str
    content: str
    author_id: int
    author: Optional[AuthorSummary] = None
    image_url: str = ""
    created_at: datetime
    updated_at: datetime
    comments: List[CommentOut] = []


class PostUpdate(BaseModel):
    """Schema for blog post update request; omitted fields stay unchanged."""

    title: Optional[str] = None
    content: Optional[str] = None


class CommentIn(BaseModel):
    content: Optional[str] = None


class PostResponse(BaseModel):
    message: str
    post: PostOut


class PostListResponse(BaseModel):
    message: str
    posts: List[PostOut]


class CommentResponse(BaseModel):
    message: str
    comment: CommentOut


class MessageResponse(BaseModel):
    message: str
