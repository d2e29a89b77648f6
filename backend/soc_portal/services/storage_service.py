"""
Profile photo storage on the local filesystem.

Files are stored as `<socPortalId>_DP<ext>` under STORAGE_DIR/user_dp and
served back with a cache-busting query string. Writes go through aiofiles so
an upload never blocks the event loop.
"""

import time
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from soc_portal.core.config import settings
from soc_portal.core.exceptions import InvalidFileTypeError, FileTooLargeError, PortalSystemError
from soc_portal.core.logging_config import logger


ALLOWED_PHOTO_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}


def validate_photo(content_type: Optional[str], size: int, max_size: Optional[int] = None) -> str:
    """Return the file extension for an acceptable upload, raise otherwise"""
    max_size = max_size or settings.MAX_PROFILE_PHOTO_BYTES
    if content_type not in ALLOWED_PHOTO_TYPES:
        raise InvalidFileTypeError(content_type or "unknown", list(ALLOWED_PHOTO_TYPES))
    if size > max_size:
        raise FileTooLargeError(size, max_size)
    return ALLOWED_PHOTO_TYPES[content_type]


def photo_path_from_url(url: str, storage_dir: Optional[Path] = None) -> Path:
    """Local file behind a `/api/storage/user_dp/...` URL"""
    filename = url.split("?", 1)[0].rsplit("/", 1)[-1]
    return (storage_dir or settings.profile_photo_dir) / filename


async def save_profile_photo(
    soc_portal_id: str,
    content: bytes,
    content_type: Optional[str],
    storage_dir: Optional[Path] = None,
) -> str:
    """Validate and write the photo; returns its public URL"""
    extension = validate_photo(content_type, len(content))
    upload_dir = storage_dir or settings.profile_photo_dir
    filename = f"{soc_portal_id}_DP{extension}"

    try:
        upload_dir.mkdir(parents=True, exist_ok=True)
        # Drop a previous photo stored under another extension
        for old in upload_dir.glob(f"{soc_portal_id}_DP.*"):
            if old.name != filename:
                await aiofiles.os.remove(old)
        async with aiofiles.open(upload_dir / filename, "wb") as f:
            await f.write(content)
    except OSError as e:
        logger.log_error_with_context(e, context="profile_photo_upload", soc_portal_id=soc_portal_id)
        raise PortalSystemError("Profile photo save failed") from e

    logger.info(
        f"Profile photo saved for {soc_portal_id}",
        extra={"event_type": "file_upload", "file_name": filename, "size": len(content)}
    )
    return f"/api/storage/user_dp/{filename}?t={int(time.time() * 1000)}"


async def remove_profile_photo(url: str, storage_dir: Optional[Path] = None) -> None:
    """Delete a photo written for a change that did not commit"""
    path = photo_path_from_url(url, storage_dir)
    try:
        await aiofiles.os.remove(path)
    except FileNotFoundError:
        return
    except OSError as e:
        logger.warning(f"Could not remove orphaned profile photo {path.name}: {e}")
