"""
Image decoding for pack images.

Produces uint8 pixel arrays of shape (height, width, channels), row-major
and tightly packed, ready for a texture upload.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import numpy as np
from PIL import Image

from huespack.core.errors import DecodeError

logger = logging.getLogger(__name__)


class ColorType(Enum):
    """Channel layout of a decoded image."""
    GRAY = "L"
    GRAY_ALPHA = "LA"
    RGB = "RGB"
    RGBA = "RGBA"

    @property
    def channels(self) -> int:
        """Number of bytes per pixel."""
        return len(self.value)


@dataclass(frozen=True)
class DecodedImage:
    """
    Decoded pixel buffer. The caller owns it outright.

    Attributes:
        pixels: uint8 array, shape (height, width, channels)
        width: Image width in pixels
        height: Image height in pixels
        color_type: Channel layout of pixels
    """
    pixels: np.ndarray
    width: int
    height: int
    color_type: ColorType

    def __post_init__(self):
        """Validate buffer shape against reported dimensions."""
        expected = (self.height, self.width, self.color_type.channels)
        if self.pixels.shape != expected:
            raise ValueError(f"Pixel buffer shape {self.pixels.shape} does not match {expected}")

    def tobytes(self) -> bytes:
        """Raw row-major pixel bytes."""
        return self.pixels.tobytes()


def _target_mode(image: Image.Image, force_rgba: bool) -> str:
    """Pick the Pillow mode to convert into."""
    if force_rgba:
        return "RGBA"
    if image.mode in ("L", "LA", "RGB", "RGBA"):
        return image.mode
    # Palette and other modes: keep transparency if there is any
    if "transparency" in image.info or image.mode in ("PA", "RGBa", "La"):
        return "RGBA"
    return "RGB"


def decode_image(path: Path, force_rgba: bool = True) -> DecodedImage:
    """
    Decode an image file into a fresh pixel buffer.

    Animated images (GIF) decode their first frame.

    Args:
        path: Backing image file
        force_rgba: Always convert to RGBA when True

    Returns:
        DecodedImage owning a newly allocated pixel array

    Raises:
        DecodeError: If the file is missing or Pillow cannot decode it
    """
    path = Path(path)
    if not path.is_file():
        raise DecodeError(f"Image file not found: {path}", path)

    try:
        with Image.open(path) as image:
            mode = _target_mode(image, force_rgba)
            converted = image.convert(mode) if image.mode != mode else image.copy()
    except OSError as e:
        raise DecodeError(f"Failed to decode image file {path.name!r}: {e}", path) from e

    color_type = ColorType(mode)
    pixels = np.array(converted, dtype=np.uint8)
    if pixels.ndim == 2:
        pixels = pixels[:, :, np.newaxis]
    pixels = np.ascontiguousarray(pixels)

    width, height = converted.size
    logger.debug("Decoded %s: %dx%d %s", path.name, width, height, color_type.value)
    return DecodedImage(pixels=pixels, width=width, height=height, color_type=color_type)
