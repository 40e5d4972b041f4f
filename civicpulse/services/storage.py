import os
import random
import time
from pathlib import Path
from typing import Optional

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from civicpulse.core.config import settings
from civicpulse.core.errors import ValidationError
from civicpulse.core.logger import get_logger

logger = get_logger("storage")


def generate_photo_filename(original_name: str) -> str:
    """
    Build a collision resistant name: <epoch millis>-<random 0..1e9><original extension>.
    """
    extension = os.path.splitext(original_name or "")[1].lower()
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"{unique_suffix}{extension}"


def photo_url(filename: str) -> str:
    return f"{settings.UPLOAD_URL_PREFIX.rstrip('/')}/{filename}"


async def save_report_photo(upload: Optional[UploadFile]) -> Optional[str]:
    """
    Store an uploaded report photo under UPLOAD_DIR and return its public URL.
    Returns None when no file was sent.
    """
    if upload is None or not upload.filename:
        return None

    if upload.content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise ValidationError(f"Unsupported photo type: {upload.content_type}")

    # Never buffer more than one byte past the limit
    content = await upload.read(settings.MAX_UPLOAD_SIZE + 1)
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise ValidationError("Photo is too large")

    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)

    filename = generate_photo_filename(upload.filename)
    await run_in_threadpool((upload_dir / filename).write_bytes, content)
    logger.info(f"Photo stored: filename={filename}, size={len(content)}")
    return photo_url(filename)


def delete_report_photo(image_url: Optional[str]) -> bool:
    """
    Remove a stored photo given its public URL. Missing files are ignored.
    """
    if not image_url:
        return False
    prefix = settings.UPLOAD_URL_PREFIX.rstrip("/") + "/"
    if not image_url.startswith(prefix):
        return False

    path = Path(settings.UPLOAD_DIR) / Path(image_url[len(prefix):]).name
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning(f"Could not remove photo: path={path}, error={e}")
        return False
    logger.info(f"Photo removed: path={path}")
    return True
