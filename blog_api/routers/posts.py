"""Posts router for blog posts and their comments."""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from blog_api.auth import Caller
from blog_api.deps import get_current_caller, get_ownership_engine, image_from_upload
from blog_api.ownership import OwnershipEngine
from blog_api.schemas import (
    CommentIn,
    CommentResponse,
    MessageResponse,
    PostListResponse,
    PostResponse,
    PostUpdate,
)

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["Blog"])


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=PostResponse)
@router.post("", status_code=status.HTTP_201_CREATED, response_model=PostResponse, include_in_schema=False)
def create_post(
    title: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    caller: Caller = Depends(get_current_caller),
    engine: OwnershipEngine = Depends(get_ownership_engine),
):
    """
    Create a new blog post, optionally with an image.

    Args:
        title: Blog post title
        content: Blog post body
        image: Optional image file, uploaded to the asset store
        caller: Authenticated caller
        engine: Ownership engine for this request

    Returns:
        PostResponse: Created blog post
    """
    logger.info(f"Creating new blog post: {title}")
    post = engine.create_post(caller, title, content, image_from_upload(image))
    return {"message": "Blog post created successfully", "post": post}


@router.get("/user", response_model=PostListResponse)
def list_own_posts(
    caller: Caller = Depends(get_current_caller),
    engine: OwnershipEngine = Depends(get_ownership_engine),
):
    """List the caller's own posts, most recent first."""
    posts = engine.list_own_posts(caller)
    return {"message": "User posts retrieved successfully", "posts": posts}


@router.put("/{post_id}", response_model=PostResponse)
def update_post(
    post_id: int,
    update_data: PostUpdate,
    caller: Caller = Depends(get_current_caller),
    engine: OwnershipEngine = Depends(get_ownership_engine),
):
    """
    Update title and/or content of a post. Author only.

    Args:
        post_id: Blog post ID
        update_data: Fields to update
        caller: Authenticated caller
        engine: Ownership engine for this request

    Returns:
        PostResponse: Updated blog post
    """
    logger.info(f"Updating blog post {post_id}")
    post = engine.update_post(caller, post_id, update_data.title, update_data.content)
    return {"message": "Blog post updated successfully", "post": post}


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: int,
    caller: Caller = Depends(get_current_caller),
    engine: OwnershipEngine = Depends(get_ownership_engine),
):
    """Delete a post and its comments. Author or admin."""
    logger.info(f"Deleting blog post {post_id}")
    engine.delete_post(caller, post_id)
    return {"message": "Blog post deleted successfully"}


@router.get("/", response_model=PostListResponse)
@router.get("", response_model=PostListResponse, include_in_schema=False)
def list_posts(engine: OwnershipEngine = Depends(get_ownership_engine)):
    """
    List all blog posts, most recent first.

    Args:
        engine: Ownership engine for this request

    Returns:
        PostListResponse: Posts with their authors resolved
    """
    logger.info("Fetching all blog posts")
    posts = engine.list_posts()
    return {"message": "Blog posts retrieved successfully", "posts": posts}


@router.get("/{post_id}", response_model=PostResponse)
def get_post(post_id: int, engine: OwnershipEngine = Depends(get_ownership_engine)):
    logger.info(f"Fetching blog post {post_id}")
    post = engine.get_post(post_id)
    return {"message": "Blog post retrieved successfully", "post": post}


# Comments

@router.post("/{post_id}/comments", status_code=status.HTTP_201_CREATED, response_model=PostResponse)
def add_comment(
    post_id: int,
    comment_data: CommentIn,
    caller: Caller = Depends(get_current_caller),
    engine: OwnershipEngine = Depends(get_ownership_engine),
):
    """Append a comment to a post; returns the whole post."""
    logger.info(f"Adding comment to blog post {post_id}")
    post = engine.add_comment(caller, post_id, comment_data.content)
    return {"message": "Comment added successfully", "post": post}


@router.put("/{post_id}/comments/{comment_id}", response_model=CommentResponse)
def update_comment(
    post_id: int,
    comment_id: str,
    comment_data: CommentIn,
    caller: Caller = Depends(get_current_caller),
    engine: OwnershipEngine = Depends(get_ownership_engine),
):
    """Edit a comment. Comment author only."""
    logger.info(f"Updating comment {comment_id} on blog post {post_id}")
    comment = engine.update_comment(caller, post_id, comment_id, comment_data.content)
    return {"message": "Comment updated successfully", "comment": comment}


@router.delete("/{post_id}/comments/{comment_id}", response_model=MessageResponse)
def delete_comment(
    post_id: int,
    comment_id: str,
    caller: Caller = Depends(get_current_caller),
    engine: OwnershipEngine = Depends(get_ownership_engine),
):
    """Remove a comment. Comment author or admin."""
    logger.info(f"Deleting comment {comment_id} from blog post {post_id}")
    engine.delete_comment(caller, post_id, comment_id)
    return {"message": "Comment deleted successfully"}
