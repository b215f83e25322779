"""Test quality masking and precipitation thresholding."""

import numpy as np
import pytest

from raincell.errors import ShapeMismatchError
from raincell.radar.binarizer import (
    RadarBinarizer,
    accumulate_frames,
    binarize,
    binarize_arrays,
    fill_long_window_nulls,
)
from tests.helpers.fake_frame import make_frame

pytestmark = pytest.mark.unit


def _pixel(acrr, quality):
    return bool(binarize_arrays(np.array([[acrr]], dtype=float), np.array([[quality]], dtype=float),
                                10, 50)[0, 0])


@pytest.mark.parametrize("acrr", [0, 50, 1000, 65534])
def test_low_quality_always_excluded(acrr):
    assert not _pixel(acrr, 9)


def test_threshold_boundaries():
    assert _pixel(50, 50)
    assert _pixel(50, 10)
    assert not _pixel(49, 50)


@pytest.mark.parametrize("acrr,quality", [(np.nan, 80), (100, np.nan), (np.nan, np.nan)])
def test_nulls_never_precipitate(acrr, quality):
    assert not _pixel(acrr, quality)


def test_binarize_frame_shape_and_dtype():
    acrr = np.array([[0, 60, 60], [49, 50, np.nan]])
    quality = np.array([[80, 80, 5], [80, 10, 80]])
    frame = make_frame(acrr, quality)

    binary = binarize(frame, 10, 50)

    assert binary.dtype == np.bool_
    np.testing.assert_array_equal(binary, [[False, True, False], [False, True, False]])


def test_binarize_empty_frame():
    frame = make_frame(np.zeros((0, 0)))

    assert binarize(frame, 10, 50).shape == (0, 0)


@pytest.mark.parametrize("q_thr,p_thr", [(-1, 50), (101, 50), (10, -1)])
def test_invalid_thresholds_rejected(q_thr, p_thr):
    with pytest.raises(ValueError):
        binarize_arrays(np.zeros((2, 2)), np.zeros((2, 2)), q_thr, p_thr)


def test_layer_shape_mismatch_rejected():
    with pytest.raises(ShapeMismatchError):
        binarize_arrays(np.zeros((2, 2)), np.zeros((2, 3)), 10, 50)


def test_binarizer_from_config(make_config):
    config = make_config(quality_threshold=50, precipitation_threshold=100)
    binarizer = RadarBinarizer(config)
    frame = make_frame(np.array([[100.0, 100.0]]), np.array([[50.0, 49.0]]))

    np.testing.assert_array_equal(binarizer.binarize(frame), [[True, False]])


def test_short_window_keeps_nulls():
    acc = np.array([np.nan, 1.0])

    assert fill_long_window_nulls(acc, 15) is acc


def test_long_window_treats_null_as_zero():
    acc = np.array([np.nan, 1.0])

    out = fill_long_window_nulls(acc, 20)

    np.testing.assert_array_equal(out, [0.0, 1.0])
    assert np.isnan(acc[0])


def test_accumulate_three_frames_keeps_nulls():
    frames = [make_frame(np.array([[np.nan, 10.0]]), timestamp=f"2025-06-02T18:{m:02d}")
              for m in (0, 5, 10)]

    out = accumulate_frames(frames)

    assert np.isnan(out.accumulation[0, 0])
    assert out.accumulation[0, 1] == 30.0
    assert out.stack.attrs["accumulation_minutes"] == 15


def test_accumulate_long_window_sums_with_null_as_zero():
    frames = [make_frame(np.array([[np.nan if m == 0 else 10.0, 10.0]]),
                         np.array([[80.0, 20.0 + m]]),
                         timestamp=f"2025-06-02T18:{m:02d}")
              for m in (0, 5, 10, 15)]

    out = accumulate_frames(frames)

    np.testing.assert_array_equal(out.accumulation, [[30.0, 40.0]])
    np.testing.assert_array_equal(out.quality, [[80.0, 20.0]])
    assert out.timestamp == frames[0].timestamp


def test_accumulate_single_frame_never_fills():
    frame = make_frame(np.array([[np.nan, 10.0]]))

    assert np.isnan(accumulate_frames([frame]).accumulation[0, 0])


def test_accumulate_rejects_different_grids():
    a = make_frame(np.zeros((2, 2)))
    b = make_frame(np.zeros((2, 3)))

    with pytest.raises(ShapeMismatchError):
        accumulate_frames([a, b])


def test_accumulate_rejects_empty_sequence():
    with pytest.raises(ValueError):
        accumulate_frames([])
