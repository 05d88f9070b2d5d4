"""
Error types raised by the quantization engine.
"""


class QuantizationError(ValueError):
    """Base class for every failure raised by palettequant."""


class ImageDataError(QuantizationError):
    """Source raster buffer is missing, too short or otherwise unreadable."""


class InvalidColorCountError(QuantizationError):
    """Requested palette size is not a positive power of two in range."""


class DegenerateInputError(QuantizationError):
    """Fewer samples are available than buckets were requested."""


class ComponentMismatchError(QuantizationError):
    """Pixel byte layout does not match the sample component count."""
