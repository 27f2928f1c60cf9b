"""Image normalization: bounded resize and format-preserving re-encode."""
from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from fastapi.concurrency import run_in_threadpool
from PIL import Image, ImageOps, UnidentifiedImageError

from .constants import DEFAULT_MAX_WIDTH, DEFAULT_QUALITY, IMAGE_BUDGETS, AssetKind
from .exceptions import DecodeError, RenderError

PNG_MIME = "image/png"
JPEG_MIME = "image/jpeg"

_ALPHA_CAPABLE_MARKERS = ("png", "webp", "gif")
_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^,;]+)*?);base64,(?P<data>.*)$", re.S)


@dataclass(frozen=True)
class EncodedImage:
    """Encoded image bytes together with their MIME type."""

    data: bytes
    content_type: str
    width: int
    height: int

    @property
    def extension(self) -> str:
        return "png" if self.content_type == PNG_MIME else "jpg"

    @property
    def data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"

    @classmethod
    def from_data_url(cls, data_url: str) -> "EncodedImage":
        match = _DATA_URL_RE.match(data_url.strip())
        if not match:
            raise DecodeError("Not a base64 data URL")
        try:
            raw = base64.b64decode(match.group("data"), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise DecodeError("Data URL payload is not valid base64") from exc
        image = _decode(raw)
        content_type = match.group("mime") or Image.MIME.get(image.format or "", JPEG_MIME)
        return cls(data=raw, content_type=content_type, width=image.width, height=image.height)


def target_size(width: int, height: int, max_width: int) -> tuple[int, int]:
    """Scale down to ``max_width`` keeping the aspect ratio; never upscale."""

    if width <= max_width:
        return width, height
    return max_width, max(1, round(height * max_width / width))


def keeps_transparency(content_type: str | None, filename: str | None) -> bool:
    content_type = (content_type or "").lower()
    suffix = Path(filename or "").suffix.lower().lstrip(".")
    return any(marker in content_type for marker in _ALPHA_CAPABLE_MARKERS) or (
        suffix in _ALPHA_CAPABLE_MARKERS
    )


def _decode(data: bytes) -> Image.Image:
    if not data:
        raise DecodeError("Uploaded file is empty")
    try:
        image = Image.open(BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise DecodeError("Uploaded file is not a valid image") from exc
    return image


def _jpeg_quality(quality: float) -> int:
    return max(1, min(100, round(quality * 100)))


def normalize_image(
    data: bytes,
    content_type: str | None = None,
    filename: str | None = None,
    max_width: int = DEFAULT_MAX_WIDTH,
    quality: float = DEFAULT_QUALITY,
) -> EncodedImage:
    """Resize ``data`` to at most ``max_width`` pixels wide and re-encode it.

    PNG, WEBP and GIF sources are written as PNG so their alpha channel
    survives; everything else becomes a JPEG at ``quality`` (0..1).
    """

    if max_width <= 0:
        raise ValueError("max_width must be a positive integer")
    if not 0 <= quality <= 1:
        raise ValueError("quality must be between 0 and 1")

    source = _decode(data)
    try:
        # Camera photos carry their rotation in EXIF; the output must not.
        source = ImageOps.exif_transpose(source)
    except (OSError, ValueError) as exc:
        raise DecodeError("Image orientation data is unreadable") from exc
    width, height = target_size(source.width, source.height, max_width)

    try:
        rendered = source.convert("RGBA")
        if rendered.size != (width, height):
            rendered = rendered.resize((width, height), Image.LANCZOS)
        # Start from a cleared surface so transparent pixels stay transparent.
        canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        canvas.alpha_composite(rendered)
    except (MemoryError, ValueError, OSError) as exc:
        raise RenderError("Could not render the image onto a drawing surface") from exc

    buffer = BytesIO()
    if keeps_transparency(content_type, filename):
        canvas.save(buffer, format="PNG", optimize=True)
        output_type = PNG_MIME
    else:
        canvas.convert("RGB").save(
            buffer, format="JPEG", optimize=True, quality=_jpeg_quality(quality)
        )
        output_type = JPEG_MIME

    return EncodedImage(
        data=buffer.getvalue(), content_type=output_type, width=width, height=height
    )


async def normalize(
    data: bytes,
    content_type: str | None = None,
    filename: str | None = None,
    max_width: int = DEFAULT_MAX_WIDTH,
    quality: float = DEFAULT_QUALITY,
) -> EncodedImage:
    """Awaitable ``normalize_image``; the Pillow work runs in the threadpool."""

    return await run_in_threadpool(
        normalize_image, data, content_type, filename, max_width, quality
    )


async def normalize_for(
    kind: AssetKind, data: bytes, content_type: str | None, filename: str | None
) -> EncodedImage:
    budget = IMAGE_BUDGETS[kind]
    return await normalize(data, content_type, filename, budget.max_width, budget.quality)
