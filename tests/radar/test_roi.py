"""Test region-of-interest selection on the native polar-stereographic grid."""

import logging

import numpy as np
import pytest

from raincell.radar.radar_utils import native_to_lonlat
from raincell.radar.roi import BoundingBox, region_mask, select_region
from tests.helpers.fake_frame import make_frame

pytestmark = pytest.mark.unit


@pytest.fixture
def frame():
    """20x20 km grid centred on (6.5E, 46.0N), accumulation = pixel index."""
    acrr = np.arange(400, dtype=float).reshape(20, 20)
    return make_frame(acrr)


def _lonlat(frame):
    xx, yy = np.meshgrid(frame.x, frame.y)
    return native_to_lonlat(frame.projection, xx, yy)


def test_box_containing_everything_keeps_frame(frame):
    out = select_region(frame, BoundingBox(-3.0, 9.0, 43.0, 49.0))

    assert out.shape == frame.shape
    np.testing.assert_array_equal(out.accumulation, frame.accumulation)
    assert out.timestamp == frame.timestamp
    assert out.projection == frame.projection


def test_box_outside_extent_yields_empty_frame(frame, caplog):
    with caplog.at_level(logging.INFO, logger="raincell.radar.roi"):
        out = select_region(frame, BoundingBox(100.0, 110.0, 10.0, 20.0))

    assert out.is_empty
    assert out.shape == (0, 0)
    assert out.timestamp == frame.timestamp
    assert "frame is empty" in caplog.text


def test_empty_frame_passes_through(frame):
    empty = select_region(frame, BoundingBox(100.0, 110.0, 10.0, 20.0))

    assert select_region(empty, BoundingBox(-3.0, 9.0, 43.0, 49.0)).is_empty


def test_partial_box_keeps_only_inside_pixels(frame):
    bbox = BoundingBox(6.45, 6.55, 45.97, 46.03)

    out = select_region(frame, bbox)
    lon, lat = _lonlat(out)
    inside = bbox.contains(lon, lat)

    assert 0 < out.shape[0] < frame.shape[0]
    assert 0 < out.shape[1] < frame.shape[1]
    # every kept non-null pixel is inside, every outside pixel is null in both layers
    assert np.all(np.isfinite(out.accumulation[inside]))
    assert np.all(np.isnan(out.accumulation[~inside]))
    assert np.all(np.isnan(out.quality[~inside]))
    # window is tight: every edge row/column holds at least one inside pixel
    assert inside[0].any() and inside[-1].any()
    assert inside[:, 0].any() and inside[:, -1].any()


def test_selected_values_match_source_pixels(frame):
    bbox = BoundingBox(6.45, 6.55, 45.97, 46.03)
    mask = region_mask(frame, bbox)

    out = select_region(frame, bbox)

    kept = out.accumulation[np.isfinite(out.accumulation)]
    np.testing.assert_array_equal(np.sort(kept), np.sort(frame.accumulation[mask]))


def test_region_mask_uses_closed_box(frame):
    lon, lat = _lonlat(frame)
    # a box whose edges pass exactly through one pixel centre
    bbox = BoundingBox(float(lon[10, 10]), float(lon[10, 10]) + 1.0,
                       float(lat[10, 10]), float(lat[10, 10]) + 1.0)

    assert region_mask(frame, bbox)[10, 10]


def test_select_region_does_not_modify_input(frame):
    before = frame.accumulation.copy()

    select_region(frame, BoundingBox(6.45, 6.55, 45.97, 46.03))

    np.testing.assert_array_equal(frame.accumulation, before)


def test_invalid_bbox_rejected():
    with pytest.raises(ValueError):
        BoundingBox(9.0, -3.0, 43.0, 49.0)


def test_bbox_from_config(internal_config):
    bbox = BoundingBox.from_config(internal_config.roi)

    assert bbox == BoundingBox(-3.0, 9.0, 43.0, 49.0)
