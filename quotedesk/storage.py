"""Local object storage for uploaded images."""
from __future__ import annotations

import logging
import os
import secrets
import time
from pathlib import Path, PurePosixPath

from fastapi.concurrency import run_in_threadpool

from .exceptions import UploadError
from .imaging import EncodedImage

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
STORAGE_ROOT = Path(os.getenv("STORAGE_ROOT", str(BASE_DIR / "media_storage")))
PUBLIC_STORAGE_URL = os.getenv("PUBLIC_STORAGE_URL", "/storage").rstrip("/")


def storage_path(entity_kind: str, entity_id: str | None = None, asset_kind: str | None = None) -> str:
    """Build a ``{entity_kind}/{entity_id}/{asset_kind}`` namespace hint."""

    parts = [entity_kind, entity_id, asset_kind]
    return "/".join(part.strip("/") for part in parts if part)


def _safe_hint(path_hint: str) -> PurePosixPath:
    hint = PurePosixPath(path_hint.strip("/")) if path_hint else PurePosixPath()
    if hint.is_absolute() or ".." in hint.parts:
        raise UploadError(f"Invalid storage path '{path_hint}'")
    return hint


def resolve_stored_file(relative_path: str) -> Path | None:
    """Map a public relative path back to a file under the storage root."""

    try:
        hint = _safe_hint(relative_path)
    except UploadError:
        return None
    candidate = STORAGE_ROOT / hint
    return candidate if candidate.is_file() else None


def _coerce_source(source: EncodedImage | bytes | str, filename: str | None) -> tuple[bytes, str]:
    if isinstance(source, EncodedImage):
        return source.data, source.extension
    if isinstance(source, str):
        if not source.startswith("data:"):
            raise UploadError("Invalid file format. Expected bytes or a data URL.")
        image = EncodedImage.from_data_url(source)
        return image.data, image.extension
    suffix = Path(filename or "").suffix.lower().lstrip(".")
    return source, suffix or "jpg"


def upload_image(
    source: EncodedImage | bytes | str, path_hint: str, filename: str | None = None
) -> str:
    """Persist ``source`` under ``path_hint`` and return its public URL."""

    data, extension = _coerce_source(source, filename)
    hint = _safe_hint(path_hint)
    name = f"{secrets.token_hex(8)}-{int(time.time() * 1000)}.{extension}"
    relative = hint / name

    try:
        target = STORAGE_ROOT / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("xb") as handle:
            handle.write(data)
    except OSError as exc:
        logger.error("Storage upload to %s failed: %s", relative, exc)
        raise UploadError(f"Could not store image at '{relative}'") from exc

    logger.info("Stored %d bytes at %s", len(data), relative)
    return f"{PUBLIC_STORAGE_URL}/{relative.as_posix()}"


async def upload(source: EncodedImage | bytes | str, path_hint: str, filename: str | None = None) -> str:
    return await run_in_threadpool(upload_image, source, path_hint, filename)
