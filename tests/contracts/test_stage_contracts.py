"""Tests for pipeline contracts.

These tests verify that contracts are enforced at stage boundaries.
They test contract violations directly, without defensive logic downstream.
"""

import dataclasses

import numpy as np
import pandas as pd
import pytest

from raincell import contracts
from raincell.contracts import (
    PIPELINE_INVARIANTS,
    ContractViolation,
    FailurePolicy,
    assert_binary_map,
    assert_cells,
    assert_frame,
    assert_time_ordered,
    require,
)
from raincell.contracts.invariants import STAGE_CONTRACTS
from raincell.radar.cell_analyzer import extract_cells
from tests.helpers.fake_frame import make_frame

pytestmark = pytest.mark.unit


class TestRequire:

    def test_require_passes(self):
        require(True, "never raised")

    def test_require_raises_contract_violation(self):
        with pytest.raises(ContractViolation, match="broken"):
            require(False, "broken")

    def test_contract_violation_is_runtime_error(self):
        assert issubclass(ContractViolation, RuntimeError)

    def test_failure_policies(self):
        assert FailurePolicy("fail_fast") is FailurePolicy.FAIL_FAST
        assert FailurePolicy("skip_file") is FailurePolicy.SKIP_FILE

    def test_invariants_documented_per_stage(self):
        assert set(PIPELINE_INVARIANTS) == {"frame", "binary", "cells", "ordering"}

    def test_stage_contracts_name_exported_asserts(self):
        for name in STAGE_CONTRACTS.values():
            assert callable(getattr(contracts, name))


class TestFrameContract:

    def test_valid_frame_passes(self):
        assert_frame(make_frame(np.ones((2, 3)), np.full((2, 3), 80.0)))

    def test_empty_frame_passes(self):
        assert_frame(make_frame(np.zeros((0, 0))))

    def test_missing_layer_fails(self):
        frame = make_frame(np.ones((2, 3)))
        broken = frame.with_stack(frame.stack.drop_vars("QUALITY"))

        with pytest.raises(ContractViolation, match="missing 'QUALITY'"):
            assert_frame(broken)

    def test_wrong_dim_order_fails(self):
        frame = make_frame(np.ones((2, 3)))
        broken = frame.with_stack(frame.stack.transpose("x", "y", "time"))

        with pytest.raises(ContractViolation, match="dims"):
            assert_frame(broken)

    def test_quality_out_of_range_fails(self):
        frame = make_frame(np.ones((2, 2)), np.array([[0.0, 50.0], [100.0, 101.0]]))

        with pytest.raises(ContractViolation, match="QUALITY"):
            assert_frame(frame)


class TestBinaryContract:

    def test_valid_map_passes(self):
        frame = make_frame(np.array([[100.0, np.nan]]))

        assert_binary_map(np.array([[True, False]]), frame)

    def test_non_bool_fails(self):
        frame = make_frame(np.ones((1, 2)))

        with pytest.raises(ContractViolation, match="dtype"):
            assert_binary_map(np.array([[1, 0]]), frame)

    def test_shape_mismatch_fails(self):
        frame = make_frame(np.ones((1, 2)))

        with pytest.raises(ContractViolation, match="shape"):
            assert_binary_map(np.zeros((2, 2), dtype=bool), frame)

    def test_true_on_null_fails(self):
        frame = make_frame(np.array([[100.0, 100.0]]), np.array([[80.0, np.nan]]))

        with pytest.raises(ContractViolation, match="null"):
            assert_binary_map(np.array([[True, True]]), frame)


class TestCellContract:

    @pytest.fixture
    def binary(self):
        return np.array([
            [1, 1, 0, 0],
            [0, 0, 0, 1],
        ], dtype=bool)

    @pytest.fixture
    def cells(self, binary):
        return extract_cells(binary, make_frame(np.where(binary, 100.0, 0.0)))

    def test_extracted_cells_pass(self, cells, binary):
        assert_cells(cells, binary)

    def test_no_cells_pass_for_all_false(self):
        assert_cells([], np.zeros((2, 2), dtype=bool))

    def test_ids_out_of_order_fail(self, cells, binary):
        with pytest.raises(ContractViolation, match="ids"):
            assert_cells(list(reversed(cells)), binary)

    def test_uncovered_pixel_fails(self, cells, binary):
        with pytest.raises(ContractViolation, match="not covered"):
            assert_cells(cells[:1], binary)

    def test_uncovered_pixel_allowed_with_size_filter(self, cells, binary):
        assert_cells(cells[:1], binary, min_cell_pixels=2)

    def test_overlap_fails(self, cells, binary):
        overlapping = dataclasses.replace(cells[1], pixels=cells[1].pixels + ((0, 1),))

        with pytest.raises(ContractViolation, match="overlap"):
            assert_cells([cells[0], overlapping], binary)

    def test_false_pixel_fails(self, cells, binary):
        stray = dataclasses.replace(cells[1], pixels=((1, 0),))

        with pytest.raises(ContractViolation, match="false pixel"):
            assert_cells([cells[0], stray], binary, min_cell_pixels=1)


class TestOrderingContract:

    def test_ascending_passes(self):
        assert_time_ordered([pd.Timestamp("2025-06-02T18:00"), pd.Timestamp("2025-06-02T18:05")])

    def test_empty_and_single_pass(self):
        assert_time_ordered([])
        assert_time_ordered([pd.Timestamp("2025-06-02T18:00")])

    @pytest.mark.parametrize("second", ["2025-06-02T18:00", "2025-06-02T17:55"])
    def test_duplicate_or_decreasing_fails(self, second):
        with pytest.raises(ContractViolation, match="Ordering"):
            assert_time_ordered([pd.Timestamp("2025-06-02T18:00"), pd.Timestamp(second)])
