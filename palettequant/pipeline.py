"""
Multi-frame quantization pipeline.

Every frame contributes samples to one shared palette, then every frame is
converted against it, so all frames of an animation index the same table.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Type

import numpy as np

from .palette import IndexedImage, Palette
from .quantize import DEFAULT_COLORS, MedianCutPaletteBuilder
from .raster import RasterImage, raster_from_array
from .sample import RGBASample, Sample

logger = logging.getLogger(__name__)


@dataclass
class QuantizedFrames:
    """A shared palette and the frames converted against it."""
    palette: Palette
    frames: List[IndexedImage] = field(default_factory=list)


class FrameQuantizer:
    """
    Quantizes a sequence of frames to one shared palette.
    """

    def __init__(self,
                 colors: int = DEFAULT_COLORS,
                 sample_type: Type[Sample] = RGBASample,
                 transparent_background: bool = False,
                 allow_filler: bool = True):
        """
        Initialize the quantizer.

        Args:
            colors: Palette size, a power of two up to 256
            sample_type: Sample kind the frames are read as
            transparent_background: Reserve index 0 for the transparent sentinel
            allow_filler: Allow fewer distinct colours than palette entries
        """
        self.builder = MedianCutPaletteBuilder(
            colors=colors,
            sample_type=sample_type,
            transparent_background=transparent_background,
            allow_filler=allow_filler,
        )
        self._rasters: List[RasterImage] = []
        self._result: Optional[QuantizedFrames] = None

    @property
    def frame_count(self) -> int:
        return len(self._rasters)

    def add_frame(self, raster: RasterImage):
        """Add a native-order raster frame."""
        if self._result is not None:
            raise RuntimeError("frames cannot be added after quantize()")
        self.builder.add_raster(raster)
        self._rasters.append(raster)

    def add_image(self, image: np.ndarray):
        """Add an RGB or RGBA array frame."""
        self.add_frame(raster_from_array(image))

    def quantize(self) -> QuantizedFrames:
        """Build the shared palette (once) and convert every frame."""
        if self._result is None:
            palette = self.builder.to_palette()
            frames = [palette.convert_raster(raster) for raster in self._rasters]
            logger.info("Quantized %d frames to %d colours (%d cached samples)",
                        len(frames), len(palette), palette.cache_size)
            self._result = QuantizedFrames(palette=palette, frames=frames)
        return self._result


def quantize_frames(rasters: Iterable[RasterImage],
                    colors: int = DEFAULT_COLORS,
                    sample_type: Type[Sample] = RGBASample,
                    transparent_background: bool = False) -> QuantizedFrames:
    """
    Convenience function to quantize frames to one shared palette.

    Args:
        rasters: Native-order raster frames
        colors: Palette size
        sample_type: Sample kind the frames are read as
        transparent_background: Reserve index 0 for the transparent sentinel

    Returns:
        QuantizedFrames with the palette and one IndexedImage per frame
    """
    quantizer = FrameQuantizer(colors, sample_type, transparent_background)
    for raster in rasters:
        quantizer.add_frame(raster)
    return quantizer.quantize()
