"""Upload Rules — which media files are accepted and how stored names are derived.

Invariants:
    - Accepted iff BOTH extension and declared MIME type are on the allow-list
    - Stored keys are `uploads/<uuid4><ext>`; the client's filename is never reused
    - Filenames containing path separators or `..` are rejected before any disk access
"""

import os
import uuid

ALLOWED_MIME_TYPES = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "video/mp4",
    "video/quicktime",
    "video/x-msvideo",
    "video/webm",
})

MIME_BY_EXTENSION = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".avi": "video/x-msvideo",
    ".webm": "video/webm",
}

KEY_PREFIX = "uploads/"


def file_extension(filename: str) -> str:
    return os.path.splitext(filename or "")[1].lower()


def is_allowed_media(filename: str, content_type: str | None) -> bool:
    return (
        file_extension(filename) in MIME_BY_EXTENSION
        and (content_type or "").lower() in ALLOWED_MIME_TYPES
    )


def make_object_key(original_name: str) -> str:
    return f"{KEY_PREFIX}{uuid.uuid4()}{file_extension(original_name)}"


def is_safe_filename(filename: str) -> bool:
    return bool(filename) and ".." not in filename and "/" not in filename and "\\" not in filename
