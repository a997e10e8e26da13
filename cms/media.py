"""
cms/media.py -- Image storage for course, college and blog pictures.

Two backends share one interface, save(data, filename, content_type) -> URL:

  LocalMediaStore       writes under UPLOAD_DIR; api/main.py serves that
                        directory at MEDIA_URL_PREFIX.
  CloudinaryMediaStore  signed upload to the Cloudinary REST API over
                        requests. Chosen when all three credentials are set.

validate_image() runs before either backend: images only, UPLOAD_MAX_BYTES
at most. Anything that goes wrong after validation surfaces as UploadFailed.
"""

import abc
import hashlib
import logging
import os
import time
import uuid
from typing import Optional

import requests

from core.config import Settings
from core.errors import UploadFailed, ValidationFailed

logger = logging.getLogger("admissionshala.media")

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
}
_TIMEOUT = 30

# Shared across uploads for connection pooling.
_session = requests.Session()
_session.max_redirects = 3


def validate_image(data: bytes, content_type: Optional[str], max_bytes: int) -> None:
    if not content_type or not content_type.startswith("image/"):
        raise ValidationFailed("Only image files are allowed.")
    if not data:
        raise ValidationFailed("No image file provided.")
    if len(data) > max_bytes:
        raise ValidationFailed(f"Image exceeds the {max_bytes // (1024 * 1024)} MB limit.")


def _extension(filename: Optional[str], content_type: str) -> str:
    ext = os.path.splitext(filename or "")[1].lower()
    if ext in _EXTENSIONS.values() or ext == ".jpeg":
        return ext
    return _EXTENSIONS.get(content_type, ".img")


class MediaStore(abc.ABC):
    @abc.abstractmethod
    def save(self, data: bytes, filename: Optional[str], content_type: str) -> str:
        """Store the image and return the URL it is served from."""


class LocalMediaStore(MediaStore):
    def __init__(self, upload_dir: str, url_prefix: str = "/media") -> None:
        self.upload_dir = upload_dir
        self.url_prefix = url_prefix.rstrip("/")

    def save(self, data: bytes, filename: Optional[str], content_type: str) -> str:
        name = f"{uuid.uuid4().hex}{_extension(filename, content_type)}"
        try:
            os.makedirs(self.upload_dir, exist_ok=True)
            with open(os.path.join(self.upload_dir, name), "wb") as fh:
                fh.write(data)
        except OSError as exc:
            logger.warning("local image write failed: %s", exc)
            raise UploadFailed() from exc
        return f"{self.url_prefix}/{name}"


class CloudinaryMediaStore(MediaStore):
    """Signed uploads: sha1 over the sorted, &-joined params plus the API secret."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, folder: str = "") -> None:
        self.endpoint = f"https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder

    def _signature(self, params: dict) -> str:
        to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params))
        return hashlib.sha1((to_sign + self.api_secret).encode()).hexdigest()

    def save(self, data: bytes, filename: Optional[str], content_type: str) -> str:
        params: dict = {"timestamp": int(time.time())}
        if self.folder:
            params["folder"] = self.folder
        form = {**params, "api_key": self.api_key, "signature": self._signature(params)}
        try:
            resp = _session.post(
                self.endpoint,
                data=form,
                files={"file": (filename or "upload", data, content_type)},
                timeout=_TIMEOUT,
            )
            resp.raise_for_status()
            url = resp.json().get("secure_url")
        except (requests.RequestException, ValueError) as exc:
            logger.warning("cloudinary upload failed: %s", exc)
            raise UploadFailed() from exc
        if not url:
            logger.warning("cloudinary response carried no secure_url")
            raise UploadFailed()
        return url


def build_media_store(settings: Settings) -> MediaStore:
    if settings.cloudinary_enabled:
        return CloudinaryMediaStore(
            settings.cloudinary_cloud_name,
            settings.cloudinary_api_key,
            settings.cloudinary_api_secret,
            settings.cloudinary_folder,
        )
    return LocalMediaStore(settings.upload_dir, settings.media_url_prefix)
