"""
Indexed raster rendering - expands indexed images back to colour.
"""
import numpy as np
from PIL import Image

from .palette import IndexedImage


def palette_array(indexed: IndexedImage) -> np.ndarray:
    """
    Colour table as an (N, 4) RGBA array.

    Entries are opaque when the image has no transparency table.
    """
    table = np.zeros((len(indexed.color_table), 4), dtype=np.uint8)
    table[:, :3] = np.array(indexed.color_table, dtype=np.uint8).reshape(-1, 3)
    if indexed.transparency is not None:
        table[:, 3] = indexed.transparency
    else:
        table[:, 3] = 255
    return table


def render_indexed(indexed: IndexedImage) -> np.ndarray:
    """
    Render an indexed image to RGBA.

    Args:
        indexed: Indexed image with its colour table

    Returns:
        RGBA image as numpy array (H, W, 4)
    """
    return palette_array(indexed)[indexed.to_array()]


def to_pil_image(indexed: IndexedImage) -> Image.Image:
    """Build a Pillow palette-mode image, carrying alpha as transparency."""
    image = Image.frombytes('P', (indexed.width, indexed.height), indexed.pixels)
    image.putpalette([v for rgb in indexed.color_table for v in rgb])
    if indexed.transparency is not None:
        image.info['transparency'] = bytes(indexed.transparency)
    return image
