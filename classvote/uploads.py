import logging
import os
import time
from pathlib import Path
from typing import NamedTuple, Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from classvote.config import Settings
from classvote.errors import ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class StoredImage(NamedTuple):
    filename: str
    path: Path
    public_url: str


def stored_filename(original: Optional[str]) -> str:
    """
    Name an upload "<epoch millis>-<original name>".
    Only the basename of the client's filename is kept so a crafted name
    cannot point outside the upload directory.
    """
    base = os.path.basename((original or "").replace("\\", "/")) or "image"
    return f"{int(time.time() * 1000)}-{base}"


def _write_file(path: Path, data: bytes) -> None:
    with open(path, "wb") as f:
        f.write(data)


async def save_image(upload: Optional[UploadFile], settings: Settings) -> Optional[StoredImage]:
    """
    Check an uploaded option image and store it in the upload directory.

    Returns None when no file was sent. Rejects anything whose content type
    is not image/* and anything larger than settings.max_upload_bytes.
    """
    if upload is None or not upload.filename:
        return None

    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise ValidationError("Not an image! Please upload an image.")

    chunks = []
    size = 0
    while True:
        chunk = await upload.read(CHUNK_SIZE)
        if not chunk:
            break
        size += len(chunk)
        if size > settings.max_upload_bytes:
            limit_mb = settings.max_upload_bytes / (1024 * 1024)
            raise ValidationError(f"File too large. Maximum size is {limit_mb:g}MB.")
        chunks.append(chunk)

    filename = stored_filename(upload.filename)
    path = settings.upload_dir / filename
    await run_in_threadpool(_write_file, path, b"".join(chunks))
    logger.info(f"Stored upload {upload.filename!r} as {path} ({size} bytes)")

    public_url = f"{settings.uploads_url_prefix.rstrip('/')}/{filename}"
    return StoredImage(filename=filename, path=path, public_url=public_url)
