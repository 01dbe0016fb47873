"""Users router for registration, login and profile management."""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, UploadFile, status

from blog_api.auth import Caller
from blog_api.deps import get_current_caller, get_user_service, image_from_upload
from blog_api.schemas import AuthorSummary, Token, UserInfoUpdate, UserLogin, UserRegister, UserResponse
from blog_api.users import UserService

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=UserResponse)
def register(user_data: UserRegister, users: UserService = Depends(get_user_service)):
    """
    Register a new user.

    Args:
        user_data: User registration data (username, email, password)
        users: User service for this request

    Returns:
        UserResponse: The newly registered user

    Raises:
        ConflictError: If the email or username already exists
    """
    user = users.register(user_data.username.strip(), user_data.email, user_data.password)
    return {"message": "User registered successfully", "user": user}


@router.post("/login", response_model=Token)
def login(user_data: UserLogin, users: UserService = Depends(get_user_service)):
    """
    Authenticate user and return JWT token.

    Args:
        user_data: User login data (username, password)
        users: User service for this request

    Returns:
        Token: JWT access token and the user it was issued for

    Raises:
        AuthError: If credentials are invalid
    """
    token, user = users.login(user_data.username.strip(), user_data.password)
    return {"access_token": token, "token_type": "bearer", "user": user}


@router.get("/details", response_model=UserResponse)
def user_details(
    caller: Caller = Depends(get_current_caller),
    users: UserService = Depends(get_user_service),
):
    """Return the caller's own profile."""
    user = users.get_user(caller.user_id)
    return {"message": "User details retrieved successfully", "user": user}


@router.put("/updateUserInfo", response_model=UserResponse)
def update_user_info(
    update_data: UserInfoUpdate,
    caller: Caller = Depends(get_current_caller),
    users: UserService = Depends(get_user_service),
):
    user = users.update_info(caller, update_data.username, update_data.email)
    return {"message": "User information updated successfully", "user": user}


@router.put("/updateUserImage", response_model=UserResponse)
def update_user_image(
    image: Optional[UploadFile] = File(None),
    caller: Caller = Depends(get_current_caller),
    users: UserService = Depends(get_user_service),
):
    """Upload a new profile image; the current one is kept when no file is sent."""
    user = users.update_image(caller, image_from_upload(image))
    return {"message": "Profile image updated successfully", "user": user}


@router.get("/{user_id}", response_model=AuthorSummary)
def get_user(user_id: int, users: UserService = Depends(get_user_service)):
    """Public, display-safe profile of any user."""
    return users.get_user(user_id)
