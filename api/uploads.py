"""
api/uploads.py -- Turn a multipart image field into a stored media URL.

Shared by the course, college and blog image endpoints. The bytes are read
with one byte of headroom so an oversized file is detected without buffering
all of it.
"""

from fastapi import Request, UploadFile

from cms.media import MediaStore, validate_image
from core.config import get_settings


def store_image(request: Request, image: UploadFile) -> str:
    max_bytes = get_settings().upload_max_bytes
    data = image.file.read(max_bytes + 1)
    validate_image(data, image.content_type, max_bytes)
    media: MediaStore = request.app.state.media_store
    return media.save(data, image.filename, image.content_type)
