"""
Raw raster buffers and adapters from decoded images.

Buffers are row-major with an explicit row stride that may include
alignment padding. Pixels are stored in the codec's native order
(B, G, R, A for four channels, B, G, R for three).
"""
import logging
from dataclasses import dataclass
from typing import Union

import cv2
import numpy as np
from PIL import Image

from .errors import ComponentMismatchError, ImageDataError

logger = logging.getLogger(__name__)

BufferLike = Union[bytes, bytearray, memoryview, np.ndarray]


@dataclass(frozen=True)
class RasterImage:
    """A raw pixel buffer together with its layout."""
    buffer: BufferLike
    width: int
    height: int
    stride: int
    bytes_per_pixel: int

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def pixels(self) -> np.ndarray:
        """Return the pixels as a (width * height, bytes_per_pixel) array."""
        return pixel_array(self.buffer, self.width, self.height,
                           self.stride, self.bytes_per_pixel)


def pixel_array(buffer: BufferLike, width: int, height: int,
                stride: int, bytes_per_pixel: int) -> np.ndarray:
    """
    Read a strided raster buffer into a tightly packed pixel array.

    Args:
        buffer: Raw bytes, row-major
        width: Pixels per row
        height: Number of rows
        stride: Bytes per row, at least width * bytes_per_pixel
        bytes_per_pixel: Bytes in one pixel

    Returns:
        uint8 array of shape (width * height, bytes_per_pixel), raw byte order

    Raises:
        ImageDataError: if the buffer is missing, unreadable or too short
    """
    if buffer is None:
        raise ImageDataError("no pixel buffer supplied")
    if width < 0 or height < 0:
        raise ImageDataError(f"invalid image size {width}x{height}")
    if bytes_per_pixel <= 0:
        raise ImageDataError(f"invalid bytes per pixel: {bytes_per_pixel}")

    row_bytes = width * bytes_per_pixel
    if stride < row_bytes:
        raise ImageDataError(
            f"stride {stride} is smaller than a row of {row_bytes} bytes"
        )

    try:
        data = np.frombuffer(buffer, dtype=np.uint8)
    except (TypeError, ValueError) as exc:
        raise ImageDataError(f"unreadable pixel buffer: {exc}") from exc

    if width == 0 or height == 0:
        return np.empty((0, bytes_per_pixel), dtype=np.uint8)

    # The last row does not need its padding.
    needed = stride * (height - 1) + row_bytes
    if data.size < needed:
        raise ImageDataError(
            f"pixel buffer holds {data.size} bytes, {needed} required "
            f"for {width}x{height} at stride {stride}"
        )

    if data.size < stride * height:
        data = np.concatenate([
            data[:needed],
            np.zeros(stride * height - needed, dtype=np.uint8),
        ])

    rows = data[:stride * height].reshape(height, stride)[:, :row_bytes]
    return rows.reshape(height * width, bytes_per_pixel)


def raster_from_array(image: np.ndarray, alignment: int = 1) -> RasterImage:
    """
    Build a native-order raster from an RGB or RGBA array.

    Args:
        image: uint8 array (H, W, 3) in RGB or (H, W, 4) in RGBA order
        alignment: Row stride is rounded up to a multiple of this

    Returns:
        RasterImage with BGR / BGRA pixels
    """
    if alignment < 1:
        raise ValueError(f"alignment must be positive, got {alignment}")

    arr = np.asarray(image)
    if arr.dtype != np.uint8:
        raise ImageDataError(f"expected uint8 pixels, got {arr.dtype}")
    arr = np.ascontiguousarray(arr)
    if arr.ndim != 3:
        raise ImageDataError(f"expected an (H, W, C) array, got shape {arr.shape}")
    if arr.shape[2] not in (3, 4):
        raise ComponentMismatchError(f"expected 3 or 4 channels, got {arr.shape[2]}")
    if arr.size == 0:
        raise ImageDataError("image has no pixels")

    h, w, channels = arr.shape
    code = cv2.COLOR_RGBA2BGRA if channels == 4 else cv2.COLOR_RGB2BGR
    native = cv2.cvtColor(arr, code)

    row_bytes = w * channels
    stride = -(-row_bytes // alignment) * alignment
    padded = np.zeros((h, stride), dtype=np.uint8)
    padded[:, :row_bytes] = native.reshape(h, row_bytes)

    return RasterImage(padded.tobytes(), w, h, stride, channels)


def raster_from_image(image: Image.Image, with_alpha: bool = True,
                      alignment: int = 1) -> RasterImage:
    """Convert a Pillow image of any mode to a native-order raster."""
    mode = 'RGBA' if with_alpha else 'RGB'
    converted = image if image.mode == mode else image.convert(mode)
    logger.debug("Converted %s image %dx%d to %s", image.mode,
                 image.width, image.height, mode)
    return raster_from_array(np.asarray(converted), alignment=alignment)
