"""
Median-cut palette construction.
"""
import logging
from typing import List, Optional, Sequence, Set, Type

import numpy as np

from .errors import ComponentMismatchError, DegenerateInputError, InvalidColorCountError
from .palette import MAX_COLORS, EuclideanPalette, Palette
from .raster import BufferLike, RasterImage, pixel_array
from .sample import RGBASample, Sample

logger = logging.getLogger(__name__)

DEFAULT_COLORS = 256


def check_color_count(colors: int, limit: Optional[int] = MAX_COLORS) -> int:
    """Validate that colors is a positive power of two, optionally bounded."""
    if isinstance(colors, bool) or not isinstance(colors, (int, np.integer)):
        raise InvalidColorCountError(f"colour count must be an integer, got {colors!r}")
    colors = int(colors)
    if colors < 1 or colors & (colors - 1):
        raise InvalidColorCountError(f"colour count must be a power of two, got {colors}")
    if limit is not None and colors > limit:
        raise InvalidColorCountError(f"colour count {colors} exceeds the limit of {limit}")
    return colors


def _component_matrix(samples: Sequence[Sample]) -> np.ndarray:
    return np.array([s.values() for s in samples], dtype=np.int16)


def _widest_column(values: np.ndarray) -> int:
    # argmax keeps the first column on ties
    spread = values.max(axis=0) - values.min(axis=0)
    return int(np.argmax(spread))


def widest_component(samples: Sequence[Sample]) -> str:
    """Tag of the component with the largest max - min spread."""
    if not samples:
        raise DegenerateInputError("cannot measure the spread of no samples")
    return samples[0].COMPONENTS[_widest_column(_component_matrix(samples))]


def median_cut(samples: Sequence[Sample], colors: int) -> List[List[Sample]]:
    """
    Partition samples into buckets using median cut.

    Median cut does this:
    1. Sort the samples by the component with the greatest spread.
    2. Cut the sorted list in half.
    3. Recur log2(colors) times.

    Sorting is stable, so the bucket order is fully determined by the input
    order.

    Args:
        samples: Input samples, at least `colors` of them
        colors: Number of buckets, a power of two

    Returns:
        `colors` non-empty buckets, low to high along each cut
    """
    colors = check_color_count(colors, limit=None)
    if len(samples) < colors:
        raise DegenerateInputError(
            f"{len(samples)} samples cannot fill {colors} buckets"
        )

    matrix = _component_matrix(samples)
    buckets = _cut(matrix, np.arange(len(samples)), colors)
    return [[samples[i] for i in bucket] for bucket in buckets]


def _cut(matrix: np.ndarray, order: np.ndarray, colors: int) -> List[np.ndarray]:
    if colors == 1:
        return [order]

    values = matrix[order]
    column = _widest_column(values)
    ranked = order[np.argsort(values[:, column], kind='stable')]
    middle = len(ranked) // 2

    return (_cut(matrix, ranked[:middle], colors // 2) +
            _cut(matrix, ranked[middle:], colors // 2))


def representative(bucket: Sequence[Sample]) -> Sample:
    """
    Pick a bucket's palette colour: the median along its widest component.

    The median sample is used as-is, not an average of the bucket.
    """
    matrix = _component_matrix(bucket)
    column = _widest_column(matrix)
    ranked = np.argsort(matrix[:, column], kind='stable')
    return bucket[int(ranked[len(ranked) // 2])]


class MedianCutPaletteBuilder:
    """
    Accumulates the distinct samples of many images and builds one palette.

    All add_image calls must come before to_palette.
    """

    def __init__(self,
                 colors: int = DEFAULT_COLORS,
                 sample_type: Type[Sample] = RGBASample,
                 palette_type: Type[Palette] = EuclideanPalette,
                 transparent_background: bool = False,
                 allow_filler: bool = True):
        """
        Args:
            colors: Default palette size for to_palette
            sample_type: Sample kind the raw pixels are read as
            palette_type: Palette class to build
            transparent_background: Force index 0 to the kind's transparent sentinel
            allow_filler: Repeat samples when there are fewer distinct samples
                than colours instead of raising DegenerateInputError
        """
        if transparent_background and sample_type.transparent() is None:
            raise ComponentMismatchError(
                f"{sample_type.__name__} has no transparent sentinel"
            )

        self.colors = colors
        self.sample_type = sample_type
        self.palette_type = palette_type
        self.transparent_background = transparent_background
        self.allow_filler = allow_filler
        self.samples: Set[Sample] = set()

    @property
    def sample_count(self) -> int:
        return len(self.samples)

    def add_image(self, buffer: BufferLike, width: int, height: int,
                  stride: int, bytes_per_pixel: int):
        """Add every distinct pixel of a raw raster to the sample set."""
        expected = len(self.sample_type.COMPONENTS)
        if bytes_per_pixel != expected:
            raise ComponentMismatchError(
                f"{self.sample_type.__name__} needs {expected} bytes per pixel, "
                f"got {bytes_per_pixel}"
            )

        pixels = pixel_array(buffer, width, height, stride, bytes_per_pixel)
        if not len(pixels):
            return

        ordered = pixels[:, list(self.sample_type.BYTE_ORDER)]
        distinct = np.unique(ordered, axis=0)

        before = len(self.samples)
        self.samples.update(self.sample_type(*row) for row in distinct.tolist())
        logger.debug("Ingested %dx%d image: %d distinct, %d new samples",
                     width, height, len(distinct), len(self.samples) - before)

    def add_raster(self, raster: RasterImage):
        self.add_image(raster.buffer, raster.width, raster.height,
                       raster.stride, raster.bytes_per_pixel)

    def to_palette(self, colors: Optional[int] = None) -> Palette:
        """
        Run median cut over everything ingested so far.

        Every ingested sample is cached to its bucket's index, so converting
        the ingested images never needs a nearest-colour search.

        Args:
            colors: Palette size, a power of two up to 256. Defaults to the
                builder's colour count.

        Returns:
            Palette with exactly `colors` entries
        """
        colors = check_color_count(self.colors if colors is None else colors)
        if not self.samples:
            raise DegenerateInputError("no samples have been added")

        ordered = sorted(self.samples)
        if len(ordered) < colors:
            if not self.allow_filler:
                raise DegenerateInputError(
                    f"{len(ordered)} distinct samples cannot fill {colors} colours"
                )
            logger.warning("Only %d distinct samples for %d colours, repeating samples",
                           len(ordered), colors)
            ordered = [ordered[i % len(ordered)] for i in range(colors)]

        buckets = median_cut(ordered, colors)

        table: List[Sample] = []
        cache = {}
        reserved: List[Sample] = []
        sentinel = self.sample_type.transparent() if self.transparent_background else None
        for index, bucket in enumerate(buckets):
            table.append(representative(bucket))
            for sample in bucket:
                if index == 0 and sentinel is not None and sample != sentinel:
                    # Index 0 only holds the sentinel; place these after the table is final.
                    reserved.append(sample)
                    continue
                # Filler duplicates keep their first bucket.
                cache.setdefault(sample, index)

        if sentinel is not None:
            table[0] = sentinel

        palette = self.palette_type(table, cache=cache)
        start = 1 if len(table) > 1 else 0
        for sample in reserved:
            palette.remember(sample, palette.nearest_index(sample, start=start))

        logger.debug("Built %d colour palette from %d samples",
                     len(table), len(self.samples))
        return palette
