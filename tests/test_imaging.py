from __future__ import annotations

import asyncio
import io

import pytest
from PIL import Image

from conftest import make_image_bytes
from quotedesk import imaging
from quotedesk.exceptions import DecodeError, RenderError
from quotedesk.imaging import EncodedImage, normalize, normalize_image, target_size


def open_output(encoded: EncodedImage) -> Image.Image:
    return Image.open(io.BytesIO(encoded.data))


def test_large_jpeg_is_scaled_to_max_width() -> None:
    data = make_image_bytes((2000, 1000), "JPEG")
    encoded = normalize_image(data, "image/jpeg", "campus.jpg", max_width=1024)

    assert (encoded.width, encoded.height) == (1024, 512)
    assert encoded.content_type == "image/jpeg"
    output = open_output(encoded)
    assert output.format == "JPEG"
    assert output.size == (1024, 512)


def test_small_png_keeps_dimensions_and_format() -> None:
    data = make_image_bytes((500, 500), "PNG")
    encoded = normalize_image(data, "image/png", "logo.png", max_width=1024)

    assert (encoded.width, encoded.height) == (500, 500)
    assert encoded.content_type == "image/png"
    assert open_output(encoded).format == "PNG"


def test_transparent_pixels_survive_normalization() -> None:
    source = Image.new("RGBA", (40, 20), (0, 0, 0, 0))
    source.paste((255, 0, 0, 255), (0, 0, 20, 20))
    buffer = io.BytesIO()
    source.save(buffer, format="PNG")

    encoded = normalize_image(buffer.getvalue(), "image/png", "logo.png")
    output = open_output(encoded).convert("RGBA")

    assert encoded.content_type == "image/png"
    assert output.getpixel((30, 10))[3] == 0
    assert output.getpixel((5, 5)) == (255, 0, 0, 255)


def test_transparency_survives_downscaling() -> None:
    source = Image.new("RGBA", (1600, 400), (0, 0, 0, 0))
    source.paste((0, 0, 255, 255), (0, 0, 400, 400))
    buffer = io.BytesIO()
    source.save(buffer, format="PNG")

    encoded = normalize_image(buffer.getvalue(), "image/png", "banner.png", max_width=800)
    output = open_output(encoded).convert("RGBA")

    assert output.size == (800, 200)
    assert output.getpixel((700, 100))[3] == 0
    assert output.getpixel((50, 100))[3] == 255


def test_exif_rotation_is_applied_before_scaling() -> None:
    exif = Image.Exif()
    exif[0x0112] = 6  # rotate 90 degrees clockwise on display
    buffer = io.BytesIO()
    Image.new("RGB", (2000, 1000), (0, 128, 255)).save(buffer, format="JPEG", exif=exif)

    encoded = normalize_image(buffer.getvalue(), "image/jpeg", "phone.jpg", max_width=1024)
    output = open_output(encoded)

    assert (encoded.width, encoded.height) == (1000, 2000)
    assert output.size == (1000, 2000)
    assert output.getexif().get(0x0112) in (None, 1)


def test_extension_selects_png_when_mime_type_is_generic() -> None:
    data = make_image_bytes((64, 64), "WEBP", mode="RGBA", color=(0, 0, 0, 0))
    encoded = normalize_image(data, "application/octet-stream", "sticker.webp")

    assert encoded.content_type == "image/png"


def test_gif_sources_are_written_as_png() -> None:
    data = make_image_bytes((32, 32), "GIF", mode="P", color=1)
    encoded = normalize_image(data, "image/gif", "anim.gif")

    assert encoded.content_type == "image/png"


def test_target_size_rounds_height_and_never_upscales() -> None:
    assert target_size(3000, 1001, 1024) == (1024, 342)
    assert target_size(800, 600, 1024) == (800, 600)
    assert target_size(1024, 10, 1024) == (1024, 10)
    assert target_size(5000, 1, 100) == (100, 1)


@pytest.mark.parametrize("payload", [b"", b"definitely not an image"])
def test_undecodable_input_raises_decode_error(payload: bytes) -> None:
    with pytest.raises(DecodeError):
        normalize_image(payload, "image/png", "broken.png")


def test_truncated_image_raises_decode_error() -> None:
    data = make_image_bytes((200, 200), "JPEG")
    with pytest.raises(DecodeError):
        normalize_image(data[: len(data) // 3], "image/jpeg", "cut.jpg")


def test_invalid_parameters_are_rejected() -> None:
    data = make_image_bytes((10, 10))
    with pytest.raises(ValueError):
        normalize_image(data, "image/png", "a.png", max_width=0)
    with pytest.raises(ValueError):
        normalize_image(data, "image/png", "a.png", quality=1.5)


def test_surface_failure_raises_render_error(monkeypatch: pytest.MonkeyPatch) -> None:
    data = make_image_bytes((10, 10))

    def exploding_new(*args, **kwargs):
        raise MemoryError("no surface")

    monkeypatch.setattr(imaging.Image, "new", exploding_new)
    with pytest.raises(RenderError):
        normalize_image(data, "image/png", "a.png")


def test_data_url_describes_its_content() -> None:
    encoded = normalize_image(make_image_bytes((20, 10), "JPEG"), "image/jpeg", "a.jpg")

    assert encoded.data_url.startswith("data:image/jpeg;base64,")
    parsed = EncodedImage.from_data_url(encoded.data_url)
    assert parsed.data == encoded.data
    assert (parsed.width, parsed.height) == (20, 10)


def test_normalize_is_awaitable() -> None:
    data = make_image_bytes((1500, 300), "JPEG")
    encoded = asyncio.run(normalize(data, "image/jpeg", "wide.jpg", 750, 0.5))

    assert (encoded.width, encoded.height) == (750, 150)
