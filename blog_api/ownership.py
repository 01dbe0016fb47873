"""
Post and comment ownership engine.

Decides who may create, read, update and delete posts and their embedded
comments, and applies permitted mutations to the stored post document.

Rules:
- Any authenticated caller may create a post or add a comment.
- Only the author may edit a post or a comment. Admins have no override.
- A post may be deleted by its author or an admin.
- A comment may be deleted by its own author or an admin. Owning the
  parent post grants nothing.
"""

import logging
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm.attributes import flag_modified

from blog_api.assets import POST_IMAGE_FOLDER, AssetStore, ImageUpload
from blog_api.auth import Caller
from blog_api.errors import ForbiddenError, NotFoundError, ValidationError
from blog_api.models import BlogPost, User
from blog_api.schemas import AuthorSummary, CommentOut, PostOut
from blog_api.store import DocumentStore

# Configure logging
logger = logging.getLogger(__name__)


def is_permitted(caller: Caller, owner_id: int, admin_override: bool) -> bool:
    """Return True if caller owns the resource, or is an admin where admins may act."""
    if caller.user_id == owner_id:
        return True
    return admin_override and caller.is_admin


def _has_text(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def _index_comments(comments: List[dict]) -> Dict[str, int]:
    return {comment["id"]: position for position, comment in enumerate(comments)}


class OwnershipEngine:
    """Post and comment operations for one request."""

    def __init__(self, store: DocumentStore, assets: AssetStore):
        self.store = store
        self.assets = assets

    # Posts

    def create_post(
        self,
        caller: Caller,
        title: Optional[str],
        content: Optional[str],
        image: Optional[ImageUpload] = None,
    ) -> PostOut:
        """
        Create a post authored by the caller.

        The image, if any, is uploaded before anything is written; an upload
        failure aborts the operation with no post created.

        Raises:
            ValidationError: If title or content is empty, or the image type is not allowed
            UploadError: If the asset store fails
        """
        if not _has_text(title) or not _has_text(content):
            raise ValidationError("Title and content are required")
        if image is not None:
            image.validate()

        self._require_user(caller)

        image_url = ""
        if image is not None:
            image_url = self.assets.upload(image, folder=POST_IMAGE_FOLDER)

        now = datetime.utcnow()
        post = BlogPost(
            title=title.strip(),
            content=content,
            author_id=caller.user_id,
            image_url=image_url,
            created_at=now,
            updated_at=now,
            comments=[],
        )
        post = self.store.save(post)

        logger.info(f"Blog post {post.id} created by user {caller.user_id}")
        return self._present(post)

    def update_post(
        self,
        caller: Caller,
        post_id: int,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> PostOut:
        """
        Update the supplied fields of a post the caller authored.

        Raises:
            ValidationError: If neither title nor content is supplied
            NotFoundError: If the post does not exist
            ForbiddenError: If the caller is not the author, admins included
        """
        if not _has_text(title) and not _has_text(content):
            raise ValidationError("Title or content is required to update")

        post = self._load_post(post_id)

        if not is_permitted(caller, post.author_id, admin_override=False):
            logger.warning(f"User {caller.user_id} denied edit of post {post_id}")
            raise ForbiddenError("You can only edit your own blog posts")

        if _has_text(title):
            post.title = title.strip()
        if _has_text(content):
            post.content = content
        post.updated_at = datetime.utcnow()

        post = self.store.save(post)

        logger.info(f"Blog post {post_id} updated successfully")
        return self._present(post)

    def delete_post(self, caller: Caller, post_id: int) -> None:
        """
        Delete a post and, with it, every embedded comment.

        Raises:
            NotFoundError: If the post does not exist
            ForbiddenError: If the caller is neither the author nor an admin
        """
        post = self._load_post(post_id)

        if not is_permitted(caller, post.author_id, admin_override=True):
            logger.warning(f"User {caller.user_id} denied deletion of post {post_id}")
            raise ForbiddenError("You are not authorized to delete this post")

        self.store.delete_by_id(BlogPost, post_id)
        logger.info(f"Blog post {post_id} deleted by user {caller.user_id}")

    def list_posts(self) -> List[PostOut]:
        """All posts, most recent first."""
        posts = self.store.find(BlogPost, order_by="created_at", descending=True)
        logger.info(f"Found {len(posts)} blog posts")
        return self._present_many(posts)

    def get_post(self, post_id: int) -> PostOut:
        """
        Raises:
            NotFoundError: If the post does not exist
        """
        return self._present(self._load_post(post_id))

    def list_own_posts(self, caller: Caller) -> List[PostOut]:
        """Posts authored by the caller, most recent first."""
        posts = self.store.find(
            BlogPost,
            filters={"author_id": caller.user_id},
            order_by="created_at",
            descending=True,
        )
        logger.info(f"Found {len(posts)} blog posts for user {caller.user_id}")
        return self._present_many(posts)

    # Comments

    def add_comment(self, caller: Caller, post_id: int, content: Optional[str]) -> PostOut:
        """
        Append a comment by the caller to the end of the post's comments.

        Raises:
            ValidationError: If content is empty or whitespace only
            NotFoundError: If the post does not exist
        """
        if not _has_text(content):
            raise ValidationError("Comment content is required")

        post = self._load_post(post_id)
        self._require_user(caller)

        now = datetime.utcnow().isoformat()
        comment = {
            "id": uuid.uuid4().hex,
            "user_id": caller.user_id,
            "content": content,
            "created_at": now,
            "updated_at": now,
        }
        self._replace_comments(post, [dict(c) for c in post.comments] + [comment])
        post = self.store.save(post)

        logger.info(f"Comment {comment['id']} added to post {post_id} by user {caller.user_id}")
        return self._present(post)

    def update_comment(
        self,
        caller: Caller,
        post_id: int,
        comment_id: str,
        content: Optional[str],
    ) -> CommentOut:
        """
        Replace the content of a comment the caller wrote, keeping its position.

        Raises:
            ValidationError: If content is empty or whitespace only
            NotFoundError: If the post or the comment does not exist
            ForbiddenError: If the caller did not write the comment, admins included
        """
        if not _has_text(content):
            raise ValidationError("Updated comment content is required")

        post = self._load_post(post_id)
        comments = [dict(c) for c in post.comments]
        position = self._find_comment(comments, comment_id, post_id)
        comment = comments[position]

        if not is_permitted(caller, comment["user_id"], admin_override=False):
            logger.warning(f"User {caller.user_id} denied edit of comment {comment_id}")
            raise ForbiddenError("You are not authorized to update this comment")

        comment["content"] = content
        comment["updated_at"] = datetime.utcnow().isoformat()
        self._replace_comments(post, comments)
        self.store.save(post)

        logger.info(f"Comment {comment_id} on post {post_id} updated successfully")
        return self._present_comment(comment, self.store.find_by_ids(User, [comment["user_id"]]))

    def delete_comment(self, caller: Caller, post_id: int, comment_id: str) -> None:
        """
        Remove a comment, keeping the relative order of the others.

        Raises:
            NotFoundError: If the post or the comment does not exist
            ForbiddenError: If the caller is neither the comment author nor an admin
        """
        post = self._load_post(post_id)
        comments = [dict(c) for c in post.comments]
        position = self._find_comment(comments, comment_id, post_id)

        if not is_permitted(caller, comments[position]["user_id"], admin_override=True):
            logger.warning(f"User {caller.user_id} denied deletion of comment {comment_id}")
            raise ForbiddenError("You are not authorized to delete this comment")

        del comments[position]
        self._replace_comments(post, comments)
        self.store.save(post)

        logger.info(f"Comment {comment_id} deleted from post {post_id} by user {caller.user_id}")

    # Helpers

    def _load_post(self, post_id: int) -> BlogPost:
        post = self.store.find_by_id(BlogPost, post_id)
        if post is None:
            logger.warning(f"Blog post not found: {post_id}")
            raise NotFoundError("Blog post not found")
        return post

    def _require_user(self, caller: Caller) -> None:
        # Every post and comment must reference an existing author
        if self.store.find_by_id(User, caller.user_id) is None:
            logger.warning(f"Caller {caller.user_id} has no user record")
            raise NotFoundError("User not found")

    @staticmethod
    def _find_comment(comments: List[dict], comment_id: str, post_id: int) -> int:
        position = _index_comments(comments).get(comment_id)
        if position is None:
            logger.warning(f"Comment {comment_id} not found on post {post_id}")
            raise NotFoundError("Comment not found")
        return position

    @staticmethod
    def _replace_comments(post: BlogPost, comments: List[dict]) -> None:
        post.comments = comments
        flag_modified(post, "comments")

    def _present_many(self, posts: List[BlogPost]) -> List[PostOut]:
        user_ids = set()
        for post in posts:
            user_ids.add(post.author_id)
            user_ids.update(comment["user_id"] for comment in post.comments)
        users = self.store.find_by_ids(User, user_ids)
        return [self._present(post, users) for post in posts]

    def _present(self, post: BlogPost, users: Optional[Dict[int, User]] = None) -> PostOut:
        if users is None:
            user_ids = {post.author_id}
            user_ids.update(comment["user_id"] for comment in post.comments)
            users = self.store.find_by_ids(User, user_ids)

        return PostOut(
            id=post.id,
            title=post.title,
            content=post.content,
            author_id=post.author_id,
            author=self._summary(users.get(post.author_id)),
            image_url=post.image_url or "",
            created_at=post.created_at,
            updated_at=post.updated_at,
            comments=[self._present_comment(comment, users) for comment in post.comments],
        )

    def _present_comment(self, comment: dict, users: Dict[int, User]) -> CommentOut:
        return CommentOut(
            id=comment["id"],
            user_id=comment["user_id"],
            content=comment["content"],
            created_at=comment["created_at"],
            updated_at=comment["updated_at"],
            user=self._summary(users.get(comment["user_id"])),
        )

    @staticmethod
    def _summary(user: Optional[User]) -> Optional[AuthorSummary]:
        if user is None:
            return None
        return AuthorSummary.model_validate(user)
