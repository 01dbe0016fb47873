"""Test the Cloudinary asset store wrapper."""

import dataclasses

import cloudinary.uploader
import pytest
from cloudinary.exceptions import Error as CloudinaryError
from fastapi.testclient import TestClient

from blog_api.assets import AssetStore, CloudinaryAssetStore, ImageUpload
from blog_api.errors import UploadError
from blog_api.main import create_app


def png(name: str = "photo.png") -> ImageUpload:
    return ImageUpload(filename=name, content_type="image/png", data=b"\x89PNG fake")


@pytest.fixture
def cloudinary_store() -> CloudinaryAssetStore:
    return CloudinaryAssetStore("demo-cloud", "demo-key", "demo-secret")


def test_asset_store_is_abstract():
    with pytest.raises(TypeError):
        AssetStore()


def test_upload_without_credentials_raises_upload_error(monkeypatch):
    calls = []
    monkeypatch.setattr(cloudinary.uploader, "upload", lambda *args, **kwargs: calls.append(kwargs))
    store = CloudinaryAssetStore(None, None, None)

    with pytest.raises(UploadError):
        store.upload(png(), folder="uploads/blogs")
    assert calls == []


def test_upload_wraps_sdk_value_error(cloudinary_store, monkeypatch):
    def reject(*args, **kwargs):
        raise ValueError("Must supply api_key")

    monkeypatch.setattr(cloudinary.uploader, "upload", reject)

    with pytest.raises(UploadError):
        cloudinary_store.upload(png(), folder="uploads/blogs")


def test_upload_wraps_cloudinary_error(cloudinary_store, monkeypatch):
    def fail(*args, **kwargs):
        raise CloudinaryError("Server returned unexpected status code - 500")

    monkeypatch.setattr(cloudinary.uploader, "upload", fail)

    with pytest.raises(UploadError):
        cloudinary_store.upload(png(), folder="uploads/blogs")


def test_upload_without_secure_url(cloudinary_store, monkeypatch):
    monkeypatch.setattr(cloudinary.uploader, "upload", lambda *args, **kwargs: {})

    with pytest.raises(UploadError):
        cloudinary_store.upload(png(), folder="uploads/blogs")


def test_upload_passes_folder_and_transformation(cloudinary_store, monkeypatch):
    recorded = {}

    def fake_upload(file, **kwargs):
        recorded["data"] = file.read()
        recorded.update(kwargs)
        return {"secure_url": "https://res.cloudinary.com/demo-cloud/image/upload/photo.png"}

    monkeypatch.setattr(cloudinary.uploader, "upload", fake_upload)
    transformation = [{"width": 500, "height": 500, "crop": "limit"}]

    url = cloudinary_store.upload(png(), folder="profile_pictures", transformation=transformation)

    assert url == "https://res.cloudinary.com/demo-cloud/image/upload/photo.png"
    assert recorded["data"] == b"\x89PNG fake"
    assert recorded["folder"] == "profile_pictures"
    assert recorded["transformation"] == transformation
    assert recorded["resource_type"] == "image"
    assert recorded["api_key"] == "demo-key"


def test_upload_omits_empty_transformation(cloudinary_store, monkeypatch):
    recorded = {}

    def fake_upload(file, **kwargs):
        recorded.update(kwargs)
        return {"secure_url": "https://res.cloudinary.com/demo-cloud/image/upload/x.png"}

    monkeypatch.setattr(cloudinary.uploader, "upload", fake_upload)

    cloudinary_store.upload(png(), folder="uploads/blogs")

    assert recorded["folder"] == "uploads/blogs"
    assert "transformation" not in recorded


def test_create_post_with_unconfigured_cloudinary(context, make_user, auth_headers):
    author = make_user("author")
    unconfigured = dataclasses.replace(context, assets=CloudinaryAssetStore(None, None, None))

    with TestClient(create_app(unconfigured)) as client:
        response = client.post(
            "/posts/",
            headers=auth_headers(author),
            data={"title": "Hello", "content": "World"},
            files={"image": ("cat.png", b"fake png", "image/png")},
        )
        posts = client.get("/posts/").json()["posts"]

    assert response.status_code == 502
    assert response.json() == {"detail": "Cloudinary is not configured"}
    assert posts == []


def test_profile_image_with_unconfigured_cloudinary(context, make_user, auth_headers):
    user = make_user("kim")
    unconfigured = dataclasses.replace(context, assets=CloudinaryAssetStore(None, None, None))

    with TestClient(create_app(unconfigured)) as client:
        response = client.put(
            "/users/updateUserImage",
            headers=auth_headers(user),
            files={"image": ("me.png", b"fake png", "image/png")},
        )

    assert response.status_code == 502
    assert "detail" in response.json()
