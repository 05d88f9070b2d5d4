"""Tests for colour samples."""
import math

import pytest

from palettequant import ComponentMismatchError, RGBASample, RGBSample, distance


def test_from_bytes_reads_bgra_order():
    sample = RGBASample.from_bytes([10, 20, 30, 40])
    assert sample == RGBASample(r=30, g=20, b=10, a=40)


def test_from_bytes_reads_bgr_order():
    assert RGBSample.from_bytes(bytes([1, 2, 3])) == RGBSample(3, 2, 1)


def test_from_bytes_rejects_wrong_length():
    with pytest.raises(ComponentMismatchError):
        RGBASample.from_bytes([1, 2, 3])


def test_component_lookup():
    sample = RGBASample(1, 2, 3, 4)
    assert [sample.component(tag) for tag in RGBASample.COMPONENTS] == [1, 2, 3, 4]
    assert sample.values() == (1, 2, 3, 4)


def test_unknown_component_fails_fast():
    with pytest.raises(KeyError):
        RGBSample(1, 2, 3).component('a')


def test_distance_covers_alpha():
    a = RGBASample(0, 0, 0, 0)
    assert distance(a, RGBASample(3, 4, 0, 0)) == 5.0
    assert distance(a, RGBASample(0, 0, 0, 255)) == 255.0


def test_distance_symmetric_and_zero_only_for_equal():
    a = RGBASample(12, 200, 7, 255)
    b = RGBASample(250, 10, 0, 128)
    assert distance(a, b) == distance(b, a)
    assert a.distance(a) == 0.0
    assert distance(a, b) > 0.0
    assert math.isclose(distance(a, b), math.sqrt(238 ** 2 + 190 ** 2 + 7 ** 2 + 127 ** 2))


def test_samples_are_values():
    samples = {RGBASample(1, 2, 3, 4), RGBASample(1, 2, 3, 4), RGBASample(4, 3, 2, 1)}
    assert len(samples) == 2
    assert RGBASample(0, 0, 0, 1) < RGBASample(0, 0, 1, 0)


def test_transparent_sentinel_is_a_capability_of_the_kind():
    assert RGBASample.transparent() == RGBASample(0, 0, 0, 0)
    assert RGBSample.transparent() is None
    assert RGBASample.HAS_ALPHA and not RGBSample.HAS_ALPHA
