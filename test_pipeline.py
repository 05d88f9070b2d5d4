"""Tests for the multi-frame pipeline, rendering and PNG output."""
import io

import numpy as np
import pytest
from PIL import Image

from palettequant import (
    FrameQuantizer,
    IndexedImage,
    IndexedPNGEncoder,
    RasterImage,
    RGBASample,
    quantize_frames,
    raster_from_array,
    render_indexed,
)

RED = RGBASample(255, 0, 0, 255)
GREEN = RGBASample(0, 255, 0, 255)
CLEAR = RGBASample(0, 0, 0, 0)


def frame(samples):
    """A one-row BGRA raster holding the given samples."""
    buffer = bytes(v for s in samples for v in (s.b, s.g, s.r, s.a))
    return RasterImage(buffer, len(samples), 1, 4 * len(samples), 4)


def create_test_image(width=24, height=16):
    """RGBA image with a few flat regions and a transparent border."""
    img = np.zeros((height, width, 4), dtype=np.uint8)
    img[2:-2, 2:-2] = [135, 206, 235, 255]
    img[height // 2:-2, 2:-2] = [34, 139, 34, 255]
    img[4:8, 6:12] = [180, 50, 50, 255]
    return img


def test_two_frames_share_one_palette():
    result = quantize_frames([frame([RED, CLEAR]), frame([GREEN, CLEAR])], colors=4)
    table = result.palette.colors

    assert len(table) == 4
    assert {RED, GREEN, CLEAR} <= set(table)

    first, second = result.frames
    assert len(first.pixels) == 2 and len(second.pixels) == 2
    assert [table[i] for i in first.pixels] == [RED, CLEAR]
    assert [table[i] for i in second.pixels] == [GREEN, CLEAR]
    assert first.color_table == second.color_table
    assert first.transparency == second.transparency


def test_quantize_runs_once():
    quantizer = FrameQuantizer(colors=2)
    quantizer.add_frame(frame([RED, GREEN]))
    result = quantizer.quantize()
    assert quantizer.quantize() is result
    assert quantizer.frame_count == 1
    with pytest.raises(RuntimeError):
        quantizer.add_frame(frame([CLEAR]))


def test_array_frames_render_back_exactly():
    img = create_test_image()
    quantizer = FrameQuantizer(colors=8)
    quantizer.add_image(img)
    quantizer.add_image(img[::-1].copy())
    result = quantizer.quantize()

    # Four distinct colours fit in eight entries without loss.
    assert np.array_equal(render_indexed(result.frames[0]), img)
    assert np.array_equal(render_indexed(result.frames[1]), img[::-1])


def test_transparent_background_reserves_index_zero():
    quantizer = FrameQuantizer(colors=4, transparent_background=True)
    quantizer.add_image(create_test_image())
    indexed = quantizer.quantize().frames[0]
    assert indexed.color_table[0] == (0, 0, 0)
    assert indexed.transparency[0] == 0
    assert indexed.to_array()[0, 0] == 0


def test_png_encoder_writes_palette_image():
    img = create_test_image()
    indexed = quantize_frames([raster_from_array(img, alignment=4)], colors=4).frames[0]

    result, data = IndexedPNGEncoder().encode_bytes(indexed)
    assert result.ok and result.error is None
    assert result.size == len(data)

    decoded = Image.open(io.BytesIO(data))
    assert decoded.mode == 'P'
    assert decoded.size == (indexed.width, indexed.height)
    assert np.array_equal(np.asarray(decoded.convert('RGBA')), render_indexed(indexed))


def test_png_encoder_reports_codec_failure():
    broken = IndexedImage(width=4, height=4, pixels=b'\x00', color_table=[(0, 0, 0)])
    output = io.BytesIO()
    result = IndexedPNGEncoder().encode(broken, output)
    assert not result.ok
    assert result.error
    assert output.getvalue() == b''
