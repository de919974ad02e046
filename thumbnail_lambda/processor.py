"""
Thumbnail processor: decode, shrink, re-encode.

Uses Pillow for image manipulation. Produces exactly one "small" rendition
per input image, in the same format as the input (PNG only).

  - The longest edge is bounded by ``max_size`` (128 px by default).
  - The aspect ratio is preserved.
  - Images already within the bound keep their size; nothing is upscaled.
  - 16-bit grayscale is scaled down to 8-bit grayscale before resampling.
"""
from __future__ import annotations

import io
import logging

from PIL import Image, UnidentifiedImageError

from thumbnail_lambda.constants import DEFAULT_THUMBNAIL_SIZE, THUMBNAIL_FORMAT
from thumbnail_lambda.exceptions import TransformError

logger = logging.getLogger(__name__)

# Modes Pillow can resample with LANCZOS and write back to PNG as-is
_RESAMPLE_MODES = {"1", "L", "LA", "P", "RGB", "RGBA"}
# 16-bit grayscale PNGs; values span 0-65535 and must be rescaled, not clipped
_WIDE_GRAY_MODES = {"I", "I;16", "I;16B", "I;16L"}


class ThumbnailProcessor:
    """Build a bounded-size PNG thumbnail from PNG bytes."""

    def __init__(self, max_size: int = DEFAULT_THUMBNAIL_SIZE) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.max_size = max_size

    def transform(self, image_data: bytes) -> bytes:
        """Return the encoded thumbnail. Raises TransformError on bad input."""
        image = self._decode(image_data)
        source_size = image.size

        try:
            if image.mode in _WIDE_GRAY_MODES:
                image = _to_8bit_gray(image)
            elif image.mode not in _RESAMPLE_MODES:
                image = image.convert("RGBA")
            image.thumbnail((self.max_size, self.max_size), Image.LANCZOS)

            buf = io.BytesIO()
            image.save(buf, format=THUMBNAIL_FORMAT, optimize=True)
        except (OSError, ValueError) as exc:
            raise TransformError(f"encoding failed: {exc}") from exc

        logger.debug("Thumbnail %sx%s -> %sx%s", *source_size, *image.size)
        return buf.getvalue()

    def _decode(self, image_data: bytes) -> Image.Image:
        if not image_data:
            raise TransformError("empty payload")
        try:
            image = Image.open(io.BytesIO(image_data))
            fmt = image.format
            # Image.open is lazy; load() surfaces truncated or corrupt data
            image.load()
        except Image.DecompressionBombError as exc:
            raise TransformError(f"image too large: {exc}") from exc
        except UnidentifiedImageError as exc:
            raise TransformError("payload is not a recognised image") from exc
        except (OSError, SyntaxError, ValueError) as exc:
            raise TransformError(f"decoding failed: {exc}") from exc

        if fmt != THUMBNAIL_FORMAT:
            raise TransformError(f"unsupported image format {fmt}, expected {THUMBNAIL_FORMAT}")
        return image


def _to_8bit_gray(image: Image.Image) -> Image.Image:
    """Scale 16-bit samples down to 0-255 and return an "L" image."""
    if image.mode != "I":
        image = image.convert("I")
    return image.point(lambda v: v / 256).convert("L")
