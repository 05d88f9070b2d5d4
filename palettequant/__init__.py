"""
palettequant package.

Purpose:
  Quantize true-colour frames to one shared palette of up to 256 colours and
  express each frame as indexed pixels, ready for palette-based encoders.

Public API:
  MedianCutPaletteBuilder : accumulates samples, builds a palette.
  EuclideanPalette        : colour table plus memoized nearest-colour lookup.
  median_cut              : the bucketing algorithm on its own.
  FrameQuantizer          : many frames, one shared palette.
  IndexedPNGEncoder       : indexed image to palette-mode PNG.
"""
import logging

__version__ = "0.1.0"

from .errors import (
    ComponentMismatchError,
    DegenerateInputError,
    ImageDataError,
    InvalidColorCountError,
    QuantizationError,
)
from .sample import RGBASample, RGBSample, Sample, distance
from .raster import RasterImage, pixel_array, raster_from_array, raster_from_image
from .palette import MAX_COLORS, EuclideanPalette, IndexedImage, Palette
from .quantize import DEFAULT_COLORS, MedianCutPaletteBuilder, median_cut, representative
from .rasterize import render_indexed, to_pil_image
from .encoder import EncodeResult, IndexedPNGEncoder
from .pipeline import FrameQuantizer, QuantizedFrames, quantize_frames

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    # errors
    "QuantizationError",
    "ImageDataError",
    "InvalidColorCountError",
    "DegenerateInputError",
    "ComponentMismatchError",
    # samples and rasters
    "Sample",
    "RGBASample",
    "RGBSample",
    "distance",
    "RasterImage",
    "pixel_array",
    "raster_from_array",
    "raster_from_image",
    # palettes
    "MAX_COLORS",
    "DEFAULT_COLORS",
    "Palette",
    "EuclideanPalette",
    "IndexedImage",
    "MedianCutPaletteBuilder",
    "median_cut",
    "representative",
    # output
    "render_indexed",
    "to_pil_image",
    "EncodeResult",
    "IndexedPNGEncoder",
    # pipeline
    "FrameQuantizer",
    "QuantizedFrames",
    "quantize_frames",
]
