"""
Colour sample value types.

A sample is an immutable colour with a fixed, ordered set of 8-bit
components. Raw pixels arrive in the codec's native byte order (BGRA / BGR),
and each sample kind documents its permutation in BYTE_ORDER.
"""
import math
from dataclasses import dataclass
from typing import ClassVar, Optional, Sequence, Tuple

from .errors import ComponentMismatchError


class Sample:
    """Base class for colour samples."""

    # Component tags in their fixed order. Ties in median-cut go to the first.
    COMPONENTS: ClassVar[Tuple[str, ...]] = ()
    # Byte offset of each component (in COMPONENTS order) within a raw pixel.
    BYTE_ORDER: ClassVar[Tuple[int, ...]] = ()
    HAS_ALPHA: ClassVar[bool] = False

    @classmethod
    def from_bytes(cls, raw: Sequence[int]) -> 'Sample':
        """Build a sample from one raw pixel in native byte order."""
        if len(raw) != len(cls.COMPONENTS):
            raise ComponentMismatchError(
                f"{cls.__name__} needs {len(cls.COMPONENTS)} bytes per pixel, got {len(raw)}"
            )
        return cls(*(int(raw[offset]) for offset in cls.BYTE_ORDER))

    @classmethod
    def transparent(cls) -> Optional['Sample']:
        """Sentinel used for a transparent background, if the kind has one."""
        return None

    def component(self, tag: str) -> int:
        if tag not in self.COMPONENTS:
            raise KeyError(f"{type(self).__name__} has no component {tag!r}")
        return getattr(self, tag)

    def values(self) -> Tuple[int, ...]:
        return tuple(getattr(self, tag) for tag in self.COMPONENTS)

    def distance(self, other: 'Sample') -> float:
        return distance(self, other)


@dataclass(frozen=True, order=True)
class RGBASample(Sample):
    """Red, green, blue and alpha. Raw pixels are laid out B, G, R, A."""
    r: int
    g: int
    b: int
    a: int

    COMPONENTS: ClassVar[Tuple[str, ...]] = ('r', 'g', 'b', 'a')
    BYTE_ORDER: ClassVar[Tuple[int, ...]] = (2, 1, 0, 3)
    HAS_ALPHA: ClassVar[bool] = True

    @classmethod
    def transparent(cls) -> 'RGBASample':
        return cls(0, 0, 0, 0)


@dataclass(frozen=True, order=True)
class RGBSample(Sample):
    """Opaque red, green, blue. Raw pixels are laid out B, G, R."""
    r: int
    g: int
    b: int

    COMPONENTS: ClassVar[Tuple[str, ...]] = ('r', 'g', 'b')
    BYTE_ORDER: ClassVar[Tuple[int, ...]] = (2, 1, 0)


def distance(a: Sample, b: Sample) -> float:
    """
    Euclidean distance between two samples of the same kind.

    Every component counts, alpha included.
    """
    return math.sqrt(sum(
        (float(a.component(tag)) - float(b.component(tag))) ** 2
        for tag in a.COMPONENTS
    ))
