"""
Colour palettes and nearest-colour conversion to indexed rasters.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .errors import ComponentMismatchError, InvalidColorCountError
from .raster import BufferLike, RasterImage, pixel_array
from .sample import Sample, distance

logger = logging.getLogger(__name__)

# Indices are written as single bytes.
MAX_COLORS = 256


@dataclass(frozen=True)
class IndexedImage:
    """A tightly packed, one byte per pixel raster plus its colour table."""
    width: int
    height: int
    pixels: bytes
    color_table: List[Tuple[int, int, int]]
    transparency: Optional[List[int]] = None  # alpha per index, if any

    def to_array(self) -> np.ndarray:
        """Return the indices as an (H, W) uint8 array."""
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(self.height, self.width)


class Palette:
    """
    An ordered colour table with a memoized sample -> index cache.

    Subclasses provide the distance metric. Index assignment is fixed at
    construction, and a cached index is never replaced.
    """

    def __init__(self, colors: Sequence[Sample],
                 cache: Optional[Dict[Sample, int]] = None):
        if not 1 <= len(colors) <= MAX_COLORS:
            raise InvalidColorCountError(
                f"palette must hold 1 to {MAX_COLORS} colours, got {len(colors)}"
            )
        kinds = {type(color) for color in colors}
        if len(kinds) != 1:
            raise ComponentMismatchError(
                f"palette colours must share one sample kind, got {sorted(k.__name__ for k in kinds)}"
            )

        self.colors: Tuple[Sample, ...] = tuple(colors)
        self.sample_type = type(self.colors[0])
        self._cache: Dict[Sample, int] = dict(cache) if cache else {}
        bad = {s: i for s, i in self._cache.items() if not 0 <= i < len(self.colors)}
        if bad:
            raise ValueError(
                f"cached indices out of range for {len(self.colors)} colours: {bad}"
            )

    def __len__(self) -> int:
        return len(self.colors)

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def distance(self, a: Sample, b: Sample) -> float:
        raise NotImplementedError

    def is_cached(self, sample: Sample) -> bool:
        return sample in self._cache

    def best_index(self, sample: Sample) -> int:
        """
        Index of the colour closest to sample.

        Cached samples are answered directly. Otherwise every colour is
        scanned left to right and the first one at minimum distance wins;
        the answer is cached before returning.
        """
        index = self._cache.get(sample)
        if index is not None:
            return index

        index = self.nearest_index(sample)
        self._cache[sample] = index
        return index

    def nearest_index(self, sample: Sample, start: int = 0) -> int:
        """Uncached search over colours[start:], first minimum wins."""
        if not isinstance(sample, self.sample_type):
            raise ComponentMismatchError(
                f"expected {self.sample_type.__name__}, got {type(sample).__name__}"
            )
        if not 0 <= start < len(self.colors):
            raise IndexError(f"start {start} outside a {len(self.colors)} colour table")

        index = start
        best_distance = None
        for i in range(start, len(self.colors)):
            d = self.distance(sample, self.colors[i])
            if best_distance is None or d < best_distance:
                best_distance = d
                index = i
        return index

    def remember(self, sample: Sample, index: int) -> int:
        """Cache index for sample unless one is already cached; return the cached one."""
        if not 0 <= index < len(self.colors):
            raise ValueError(f"index {index} outside a {len(self.colors)} colour table")
        return self._cache.setdefault(sample, index)

    def color_table(self) -> List[Tuple[int, int, int]]:
        """Colour table as (r, g, b) triples in index order."""
        return [(c.component('r'), c.component('g'), c.component('b'))
                for c in self.colors]

    def transparency_table(self) -> Optional[List[int]]:
        """Alpha per index, or None when the samples carry no alpha."""
        if not self.sample_type.HAS_ALPHA:
            return None
        return [c.component('a') for c in self.colors]

    def convert(self, buffer: BufferLike, width: int, height: int,
                stride: int, bytes_per_pixel: int) -> IndexedImage:
        """
        Map every pixel of a raw raster to its palette index.

        Args:
            buffer: Raw pixels in the sample kind's native byte order
            width: Pixels per row
            height: Number of rows
            stride: Bytes per source row (may include padding)
            bytes_per_pixel: Must match the sample component count

        Returns:
            IndexedImage with width * height index bytes and the colour table
        """
        expected = len(self.sample_type.COMPONENTS)
        if bytes_per_pixel != expected:
            raise ComponentMismatchError(
                f"{self.sample_type.__name__} needs {expected} bytes per pixel, "
                f"got {bytes_per_pixel}"
            )

        pixels = pixel_array(buffer, width, height, stride, bytes_per_pixel)
        if len(pixels):
            ordered = pixels[:, list(self.sample_type.BYTE_ORDER)]
            distinct, inverse = np.unique(ordered, axis=0, return_inverse=True)
            lookup = np.array(
                [self.best_index(self.sample_type(*row)) for row in distinct.tolist()],
                dtype=np.uint8,
            )
            indices = lookup[inverse.reshape(-1)]
        else:
            indices = np.empty(0, dtype=np.uint8)

        logger.debug("Converted %dx%d image (%d cached samples)",
                     width, height, len(self._cache))
        return IndexedImage(
            width=width,
            height=height,
            pixels=indices.tobytes(),
            color_table=self.color_table(),
            transparency=self.transparency_table(),
        )

    def convert_raster(self, raster: RasterImage) -> IndexedImage:
        return self.convert(raster.buffer, raster.width, raster.height,
                            raster.stride, raster.bytes_per_pixel)


class EuclideanPalette(Palette):
    """Palette using straight Euclidean distance over every component."""

    def distance(self, a: Sample, b: Sample) -> float:
        return distance(a, b)
