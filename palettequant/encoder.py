"""
Indexed PNG encoder - hands indexed images to the external PNG codec.

Codec failures come back as an EncodeResult instead of an exception, so a
caller encoding many frames can decide per frame what to do.
"""
import io
import logging
from dataclasses import dataclass
from typing import BinaryIO, Optional, Tuple

from .palette import IndexedImage
from .rasterize import to_pil_image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodeResult:
    """Outcome of one encode call."""
    ok: bool
    size: int = 0
    error: Optional[str] = None


class IndexedPNGEncoder:
    """Encoder for palette-mode PNG images (PLTE, plus tRNS for alpha)."""

    def __init__(self, compress_level: int = 6, optimize: bool = False):
        self.compress_level = compress_level
        self.optimize = optimize

    def encode(self, indexed: IndexedImage, output: BinaryIO) -> EncodeResult:
        """
        Encode one indexed image to PNG.

        Nothing is written to output unless encoding succeeds.

        Args:
            indexed: Indexed image with colour and transparency tables
            output: Binary file object to write to

        Returns:
            EncodeResult with the number of bytes written or the codec error
        """
        encoded = io.BytesIO()
        try:
            image = to_pil_image(indexed)
            image.save(encoded, format='PNG',
                       compress_level=self.compress_level,
                       optimize=self.optimize)
        except (OSError, ValueError) as exc:
            logger.warning("PNG encoding failed for %dx%d image: %s",
                           indexed.width, indexed.height, exc)
            return EncodeResult(ok=False, error=str(exc))

        data = encoded.getvalue()
        output.write(data)
        return EncodeResult(ok=True, size=len(data))

    def encode_bytes(self, indexed: IndexedImage) -> Tuple[EncodeResult, bytes]:
        """Encode to an in-memory PNG; bytes are empty on failure."""
        output = io.BytesIO()
        result = self.encode(indexed, output)
        return result, output.getvalue()
