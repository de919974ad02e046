import io

import pytest
from PIL import Image

from conftest import make_png
from thumbnail_lambda.exceptions import TransformError
from thumbnail_lambda.processor import ThumbnailProcessor


def _open(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


@pytest.mark.parametrize(
    "size, expected",
    [
        ((1024, 768), (128, 96)),
        ((300, 1200), (32, 128)),
        ((500, 500), (128, 128)),
    ],
)
def test_longest_edge_bounded_and_aspect_kept(size: tuple[int, int], expected: tuple[int, int]) -> None:
    thumb = _open(ThumbnailProcessor(128).transform(make_png(*size)))
    assert thumb.format == "PNG"
    assert thumb.size == expected
    assert max(thumb.size) <= 128


def test_aspect_ratio_within_rounding() -> None:
    thumb = _open(ThumbnailProcessor(100).transform(make_png(1000, 333)))
    width, height = thumb.size
    assert width == 100
    assert abs(width / height - 1000 / 333) < 0.1


def test_small_images_are_not_upscaled() -> None:
    thumb = _open(ThumbnailProcessor(128).transform(make_png(40, 20)))
    assert thumb.size == (40, 20)


@pytest.mark.parametrize("mode", ["RGBA", "L", "P"])
def test_keeps_png_modes(mode: str) -> None:
    thumb = _open(ThumbnailProcessor(64).transform(make_png(256, 128, mode=mode)))
    assert thumb.size == (64, 32)
    assert thumb.mode == mode


def test_16_bit_grayscale_keeps_its_brightness() -> None:
    buf = io.BytesIO()
    Image.new("I;16", (256, 256), 16384).save(buf, format="PNG")

    thumb = _open(ThumbnailProcessor(64).transform(buf.getvalue()))

    assert thumb.size == (64, 64)
    assert thumb.mode == "L"
    assert thumb.getpixel((32, 32)) == 64


def test_same_input_same_pixels() -> None:
    processor = ThumbnailProcessor(50)
    data = make_png(400, 300)
    first = _open(processor.transform(data))
    second = _open(processor.transform(data))
    assert first.size == second.size
    assert first.tobytes() == second.tobytes()


def test_content_is_preserved() -> None:
    thumb = _open(ThumbnailProcessor(32).transform(make_png(320, 320)))
    assert thumb.convert("RGB").getpixel((16, 16)) == (200, 30, 30)


def test_rejects_non_png() -> None:
    buf = io.BytesIO()
    Image.new("RGB", (64, 64), (0, 0, 0)).save(buf, format="JPEG")
    with pytest.raises(TransformError, match="unsupported image format JPEG"):
        ThumbnailProcessor().transform(buf.getvalue())


@pytest.mark.parametrize("payload", [b"", b"definitely not an image", make_png(64, 64)[:40]])
def test_rejects_undecodable_payloads(payload: bytes) -> None:
    with pytest.raises(TransformError):
        ThumbnailProcessor().transform(payload)


def test_rejects_non_positive_bound() -> None:
    with pytest.raises(ValueError):
        ThumbnailProcessor(0)
