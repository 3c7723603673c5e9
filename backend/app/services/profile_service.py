"""
Project image upload handling.
"""

import uuid
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile

from core.config import Settings
from core.constants import ALLOWED_IMAGE_TYPES
from core.errors import BadRequestError
from core.logging import get_logger

logger = get_logger("profile.uploads")

UPLOAD_SUBDIR = "projects"

# Leading bytes of each accepted image format
_SIGNATURES = {
    "image/jpeg": (b"\xff\xd8\xff",),
    "image/png": (b"\x89PNG\r\n\x1a\n",),
    "image/gif": (b"GIF87a", b"GIF89a"),
}


@dataclass
class StoredUpload:
    path: Path
    url: str


def _matches_signature(content_type: str, content: bytes) -> bool:
    if content_type == "image/webp":
        return len(content) >= 12 and content[:4] == b"RIFF" and content[8:12] == b"WEBP"
    return any(content.startswith(signature) for signature in _SIGNATURES.get(content_type, ()))


def validate_image(file: UploadFile, content: bytes, settings: Settings) -> str:
    """
    Validate an uploaded project image and return its file extension.

    Checks:
    1. MIME type from the content-type header is an accepted image type
    2. File size within MAX_UPLOAD_SIZE_MB
    3. Magic bytes agree with the declared type

    Raises:
        BadRequestError: If validation fails
    """
    content_type = (file.content_type or "").lower()
    if content_type not in ALLOWED_IMAGE_TYPES:
        logger.warning("upload_invalid_mime", content_type=content_type, filename=(file.filename or "")[:50])
        raise BadRequestError("Only image files are allowed (JPEG, PNG, GIF, WebP)")

    if len(content) > settings.max_upload_size_bytes:
        raise BadRequestError(f"File size must be less than {settings.max_upload_size_mb}MB")

    if not _matches_signature(content_type, content):
        logger.warning(
            "upload_invalid_magic_bytes",
            content_type=content_type,
            first_bytes=content[:12].hex() if content else "empty",
        )
        raise BadRequestError("Uploaded file is not a valid image")

    return ALLOWED_IMAGE_TYPES[content_type]


def store_project_image(file: UploadFile, settings: Settings) -> StoredUpload:
    """Validate and write an uploaded image under UPLOAD_DIR/projects with a random name."""
    # One byte past the limit is enough to reject; never buffer the rest
    content = file.file.read(settings.max_upload_size_bytes + 1)
    extension = validate_image(file, content, settings)

    directory = Path(settings.upload_dir) / UPLOAD_SUBDIR
    directory.mkdir(parents=True, exist_ok=True)
    filename = f"project-{uuid.uuid4().hex}{extension}"
    path = directory / filename
    path.write_bytes(content)

    logger.info("upload_stored", filename=filename, size=len(content))
    return StoredUpload(path=path, url=f"/uploads/{UPLOAD_SUBDIR}/{filename}")


def remove_upload(upload: StoredUpload | None) -> None:
    """Best-effort removal of a stored upload after a failed request."""
    if upload is None:
        return
    try:
        upload.path.unlink(missing_ok=True)
        logger.info("upload_cleaned_up", path=str(upload.path))
    except OSError as exc:
        logger.error("upload_cleanup_failed", path=str(upload.path), error=str(exc))
