import logging
import time
import uuid
from pathlib import Path
from anyio import to_thread
from fastapi import UploadFile
from app.core.config import UPLOAD_DIR, ALLOWED_PHOTO_EXTENSIONS

logger = logging.getLogger("app.uploads")


def photo_extension(filename: str | None) -> str | None:
    if not filename or "." not in filename:
        return None
    ext = filename.rsplit(".", 1)[1].lower()
    return ext if ext in ALLOWED_PHOTO_EXTENSIONS else None


def _write_file(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


async def save_profile_photo(upload: UploadFile | None, upload_dir: str = UPLOAD_DIR) -> str | None:
    """
    Store an uploaded profile photo and return its relative path.
    Missing files and disallowed extensions are skipped and yield None.
    """
    if upload is None or not upload.filename:
        return None
    ext = photo_extension(upload.filename)
    if ext is None:
        logger.info("Profile photo skipped, extension not allowed filename=%s", upload.filename)
        return None

    content = await upload.read()
    if not content:
        return None

    name = f"{uuid.uuid4().hex}_{int(time.time())}.{ext}"
    path = Path(upload_dir) / name
    try:
        await to_thread.run_sync(_write_file, path, content)
    except OSError:
        logger.exception("Profile photo write failed path=%s", path)
        return None
    return str(path)
