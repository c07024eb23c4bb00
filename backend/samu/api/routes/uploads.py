"""Upload Routes — meme media upload, deletion and metadata.

Invariants:
    - Only allow-listed image/video types are stored (400 otherwise)
    - Bodies over settings.max_upload_bytes are rejected with 413 before storing
    - Stored names are server-generated; the client filename is only echoed back
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from samu.api.dependencies import get_object_storage
from samu.config import Settings, get_settings
from samu.core.errors import (
    ErrorContext, InvalidRequestError, PayloadTooLargeError, ResourceNotFoundError,
)
from samu.core.upload_rules import (
    KEY_PREFIX, is_allowed_media, is_safe_filename, make_object_key,
)
from samu.infrastructure.object_storage import ObjectStorage

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/uploads", tags=["uploads"])


def _checked_name(filename: str) -> str:
    if not is_safe_filename(filename):
        raise InvalidRequestError("Invalid filename", ErrorContext(debug_info={"filename": filename}))
    return filename


@router.post("/upload")
async def upload_file(
    file: UploadFile = File(...),
    storage: ObjectStorage = Depends(get_object_storage),
    settings: Settings = Depends(get_settings),
):
    original_name = file.filename or ""
    if not is_allowed_media(original_name, file.content_type):
        raise InvalidRequestError(
            "Invalid file type. Only images (JPEG, PNG, GIF, WebP) and videos "
            "(MP4, MOV, AVI, WebM) are allowed.",
        )
    data = await file.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        raise PayloadTooLargeError(settings.max_upload_bytes)
    if not data:
        raise InvalidRequestError("No file uploaded")

    name = make_object_key(original_name).removeprefix(KEY_PREFIX)
    file_url = await storage.save(name, data, file.content_type)
    logger.info(f"File uploaded: {name} ({len(data)} bytes)")
    return {
        "success": True,
        "file_url": file_url,
        "filename": name,
        "original_name": original_name,
        "size": len(data),
    }


@router.delete("/{filename}")
async def delete_file(
    filename: str, storage: ObjectStorage = Depends(get_object_storage),
):
    if not await storage.delete(_checked_name(filename)):
        raise ResourceNotFoundError("File", filename)
    return {"success": True, "message": "File deleted successfully"}


@router.get("/info/{filename}")
async def file_info(
    filename: str, storage: ObjectStorage = Depends(get_object_storage),
):
    info = await storage.info(_checked_name(filename))
    if info is None:
        raise ResourceNotFoundError("File", filename)
    return info.to_dict()
