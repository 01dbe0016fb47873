"""Asset store: image uploads to Cloudinary."""

import io
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from blog_api.errors import UploadError, ValidationError

# Configure logging
logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = ["jpeg", "jpg", "png", "gif", "webp"]
ALLOWED_CONTENT_TYPES = ["image/jpeg", "image/png", "image/gif", "image/webp"]

POST_IMAGE_FOLDER = "uploads/blogs"
PROFILE_IMAGE_FOLDER = "profile_pictures"
PROFILE_IMAGE_TRANSFORMATION = [{"width": 500, "height": 500, "crop": "limit"}]


@dataclass(frozen=True)
class ImageUpload:
    """Image bytes received with a request."""

    filename: str
    content_type: str
    data: bytes

    def validate(self) -> None:
        """
        Reject empty files and anything that is not a supported image type.

        Raises:
            ValidationError: If the file is empty or not an allowed image
        """
        extension = os.path.splitext(self.filename or "")[1].lower().lstrip(".")
        if extension not in ALLOWED_EXTENSIONS or self.content_type not in ALLOWED_CONTENT_TYPES:
            raise ValidationError("Only image files are allowed!")
        if not self.data:
            raise ValidationError("Uploaded image is empty")


class AssetStore(ABC):
    """Interface: upload image bytes and return a stable URL."""

    @abstractmethod
    def upload(self, image: ImageUpload, folder: str, transformation: Optional[list] = None) -> str:
        """Store the image and return its URL, raising UploadError on failure."""


class CloudinaryAssetStore(AssetStore):
    """Uploads images to Cloudinary; failures are reported, never retried."""

    def __init__(self, cloud_name: Optional[str], api_key: Optional[str], api_secret: Optional[str]):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def upload(self, image: ImageUpload, folder: str, transformation: Optional[list] = None) -> str:
        """
        Upload an image to Cloudinary.

        Args:
            image: Image to upload
            folder: Cloudinary folder to place the asset in
            transformation: Optional incoming transformation

        Returns:
            str: Secure URL of the uploaded asset

        Raises:
            UploadError: If Cloudinary is not configured, rejects the upload or returns no URL
        """
        if not self.configured:
            logger.error("Cloudinary credentials are not configured")
            raise UploadError("Cloudinary is not configured")

        logger.info(f"Uploading image {image.filename} to Cloudinary folder {folder}")

        options = {
            "folder": folder,
            "resource_type": "image",
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self.api_secret,
        }
        if transformation:
            options["transformation"] = transformation

        try:
            result = cloudinary.uploader.upload(io.BytesIO(image.data), **options)
        except (CloudinaryError, ValueError) as e:
            # the SDK raises ValueError for missing or rejected credentials
            logger.error(f"Cloudinary upload failed: {e}")
            raise UploadError("Error uploading image to Cloudinary") from e

        url = (result or {}).get("secure_url")
        if not url:
            logger.error("Cloudinary returned no secure_url")
            raise UploadError("Error uploading image to Cloudinary")

        logger.info(f"Image URL: {url}")
        return url
