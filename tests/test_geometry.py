"""Tests for orb geometry: amplitude mapping, bar layout, dot rings, rects."""

from __future__ import annotations

import math

import pytest

from ringwave.visualizers.geometry import (
    BAR_GAP,
    FLAT_PILL_HEIGHT,
    FLAT_PILL_RADIUS,
    bar_sample_index,
    bar_shapes,
    dot_rings,
    max_ring_radius,
    rounded_rect,
    sample_amplitude,
    trace_rounded_rect,
)


def test_sample_amplitude_stays_in_unit_range() -> None:
    for sample in range(256):
        assert -1.0 <= sample_amplitude(sample) <= 1.0
    assert sample_amplitude(128) == 0.0
    assert sample_amplitude(0) == -1.0
    assert sample_amplitude(255) == pytest.approx(127 / 128)


def test_bar_sample_index_always_lands_inside_buffer() -> None:
    for bar_count in (1, 7, 20, 50, 100):
        for length in (1, 3, 256, 1000):
            indexes = [bar_sample_index(i, bar_count, length) for i in range(bar_count)]
            assert all(0 <= idx < length for idx in indexes)
            assert indexes == sorted(indexes)
            assert indexes[0] == 0


def test_bar_sample_index_matches_floor_mapping() -> None:
    assert bar_sample_index(1, 4, 256) == 64
    assert bar_sample_index(3, 30, 256) == math.floor(3 / 30 * 256)


def test_bar_sample_index_degenerate_inputs_return_zero() -> None:
    assert bar_sample_index(0, 0, 10) == 0
    assert bar_sample_index(3, 5, 0) == 0


def test_dot_rings_grow_in_radius_and_density() -> None:
    rings = dot_rings(8, 200, 100)
    assert len(rings) == 8
    assert [ring.dot_count for ring in rings] == [8 + 4 * r for r in range(8)]
    radii = [ring.radius for ring in rings]
    assert radii == sorted(radii)
    assert len(set(radii)) == len(radii)
    assert max_ring_radius(200, 100) == pytest.approx(40.0)
    assert radii[0] == pytest.approx(5.0)
    assert radii[-1] == pytest.approx(40.0)


def test_dot_ring_positions_sit_on_ring() -> None:
    ring = dot_rings(4, 100, 100)[2]
    positions = ring.positions(50.0, 50.0)
    assert len(positions) == ring.dot_count == 12
    for x, y in positions:
        assert math.hypot(x - 50.0, y - 50.0) == pytest.approx(ring.radius)


def test_dot_rings_zero_count_draws_nothing() -> None:
    assert dot_rings(0, 200, 200) == []
    assert dot_rings(-3, 200, 200) == []


def test_rounded_rect_clamps_position_size_and_radius() -> None:
    rect = rounded_rect(-5, -2, -10, 4, 9)
    assert (rect.x, rect.y, rect.width, rect.height) == (0.0, 0.0, 0.0, 4.0)
    assert rect.radius == 0.0

    rect = rounded_rect(1, 2, 10, 4, 5)
    assert rect.radius == pytest.approx(2.0)

    rect = rounded_rect(1, 2, 10, 20, 3)
    assert rect.radius == pytest.approx(3.0)


def test_trace_rounded_rect_outline_stays_inside_bounds() -> None:
    rect = rounded_rect(10, 20, 30, 12, 5)
    points = trace_rounded_rect(rect, segments=4)
    assert len(points) == 4 * 5
    for x, y in points:
        assert 10 - 1e-9 <= x <= 40 + 1e-9
        assert 20 - 1e-9 <= y <= 32 + 1e-9
    assert points[0] == pytest.approx((35.0, 20.0))


def test_trace_rounded_rect_without_radius_hits_corners() -> None:
    points = trace_rounded_rect(rounded_rect(0, 0, 4, 2, 0), segments=1)
    corners = {(round(x, 6) + 0.0, round(y, 6) + 0.0) for x, y in points}
    assert corners == {(0.0, 0.0), (4.0, 0.0), (4.0, 2.0), (0.0, 2.0)}


def test_bar_shapes_silence_renders_flat_pills() -> None:
    shapes = bar_shapes(
        bytes([128] * 256), number_of_bars=20, width=200, height=100, amplitude=2.0
    )
    assert len(shapes) == 20
    for shape in shapes:
        assert shape.flat is True
        assert shape.rect.height == FLAT_PILL_HEIGHT
        assert shape.rect.y == pytest.approx(50.0 - FLAT_PILL_HEIGHT / 2)
        assert shape.rect.radius == FLAT_PILL_RADIUS
        assert shape.rect.width == pytest.approx(200 / 20 - BAR_GAP)
    assert [shape.rect.x for shape in shapes] == pytest.approx(
        [i * 10.0 for i in range(20)]
    )


def test_bar_shapes_near_bias_samples_stay_flat() -> None:
    shapes = bar_shapes(
        bytes([132, 124, 133]), number_of_bars=3, width=90, height=60, amplitude=1.0
    )
    assert [shape.flat for shape in shapes] == [True, True, False]


def test_bar_shapes_peak_sample_drives_first_bar() -> None:
    samples = bytes([255] + [128] * 255)
    shapes = bar_shapes(
        samples, number_of_bars=20, width=200, height=100, amplitude=1.5
    )
    first = shapes[0]
    assert first.flat is False
    assert first.rect.height == pytest.approx(50.0 * 1.5 * 127 / 128)
    assert first.rect.y == pytest.approx(50.0 - first.rect.height / 2)
    assert first.rect.radius == pytest.approx(min(5.0, first.rect.width / 2))
    assert all(shape.flat for shape in shapes[1:])


def test_bar_shapes_full_scale_negative_sample_reaches_center_height() -> None:
    shapes = bar_shapes(bytes([0]), number_of_bars=1, width=40, height=80, amplitude=1.0)
    assert shapes[0].rect.height == pytest.approx(40.0)


def test_bar_shapes_empty_buffer_or_zero_bars() -> None:
    assert bar_shapes(b"", number_of_bars=20, width=100, height=100, amplitude=1) == []
    assert (
        bar_shapes(bytes([200] * 8), number_of_bars=0, width=100, height=100, amplitude=1)
        == []
    )
