"""Tests for the regime grid evaluation loop."""

from __future__ import annotations

import numpy as np
import pytest

from regimemap.controller.evaluation import evaluate_grid
from regimemap.model.channels import ChannelCode
from regimemap.model.grid import GridParameters
from tests.fakes import FakeState, RecordingEvaluator, by_temperature, fails_for_negative_eta


def _spec(columns: int, rows: int, **kwargs):
    params = dict(
        log_temperature_min=3.0, log_temperature_max=7.0,
        log_density_min=-6.0, log_density_max=4.0,
    )
    params.update(kwargs)
    return GridParameters(columns=columns, rows=rows, **params).stamp(1)


class TestRasterShape:

    @pytest.mark.parametrize("columns, rows", [(1, 1), (1, 7), (7, 1), (3, 4), (100, 80)])
    def test_length_is_columns_times_rows(self, columns, rows) -> None:
        response = evaluate_grid(_spec(columns, rows), by_temperature)
        grid = response.raster.detach()
        assert grid.dtype == np.uint8
        assert grid.shape == (columns * rows,)
        assert (response.columns, response.rows) == (columns, rows)

    def test_reference_sweep(self, small_grid: GridParameters) -> None:
        response = evaluate_grid(small_grid.stamp(1), by_temperature)
        grid = response.raster.detach()

        assert len(grid) == 25
        assert set(grid.tolist()) <= {0, 1, 2, 3}
        assert response.elapsed_ms >= 0
        assert response.sequence_number == 1
        # logT = 3, 4 | 5, 6 | 7 in every row
        assert grid.tolist() == [0, 0, 1, 1, 2] * 5

    def test_row_major_layout(self) -> None:
        def by_density(state_input):
            return FakeState("gas" if state_input.density_g_per_cm3 < 0.1 else "degeneracy")

        response = evaluate_grid(_spec(4, 3, log_density_min=-2.0, log_density_max=2.0), by_density)
        assert response.raster.detach().tolist() == [0] * 4 + [2] * 8


class TestAxes:

    def test_single_column_uses_minimum_temperature(self) -> None:
        evaluator = RecordingEvaluator()
        evaluate_grid(_spec(1, 4), evaluator)
        assert len(evaluator.calls) == 4
        assert {call.temperature_k for call in evaluator.calls} == {10.0 ** 3}

    def test_single_row_uses_minimum_density(self) -> None:
        evaluator = RecordingEvaluator()
        evaluate_grid(_spec(4, 1), evaluator)
        assert len(evaluator.calls) == 4
        assert all(call.density_g_per_cm3 == pytest.approx(1e-6) for call in evaluator.calls)

    def test_cells_are_visited_row_by_row(self) -> None:
        evaluator = RecordingEvaluator()
        evaluate_grid(_spec(3, 2), evaluator)
        temps = [call.temperature_k for call in evaluator.calls]
        densities = [call.density_g_per_cm3 for call in evaluator.calls]
        assert temps == pytest.approx([1e3, 1e5, 1e7] * 2)
        assert densities == pytest.approx([1e-6] * 3 + [1e4] * 3)

    def test_composition_and_eta_are_passed_through(self, small_grid: GridParameters) -> None:
        evaluator = RecordingEvaluator()
        spec = GridParameters(
            0, 1, 0, 1, columns=2, rows=2,
            composition=small_grid.composition, radiation_departure_parameter=0.25,
        ).stamp(4)
        evaluate_grid(spec, evaluator)
        assert all(call.composition == small_grid.composition for call in evaluator.calls)
        assert all(call.radiation_departure_eta == 0.25 for call in evaluator.calls)


class TestClassification:

    def test_deterministic(self, small_grid: GridParameters) -> None:
        first = evaluate_grid(small_grid.stamp(1), by_temperature).raster.detach()
        second = evaluate_grid(small_grid.stamp(2), by_temperature).raster.detach()
        assert first.tobytes() == second.tobytes()

    @pytest.mark.parametrize("dominant", ["mixed", "neutrino", None, 3])
    def test_unknown_channel_is_mixed(self, dominant) -> None:
        response = evaluate_grid(_spec(3, 3), RecordingEvaluator(channel=dominant))
        assert set(response.raster.detach().tolist()) == {ChannelCode.MIXED}

    def test_state_without_channel_attribute_is_mixed(self) -> None:
        response = evaluate_grid(_spec(2, 2), lambda state_input: object())
        assert response.raster.detach().tolist() == [3, 3, 3, 3]

    def test_non_finite_cells_skip_the_evaluator(self) -> None:
        evaluator = RecordingEvaluator(channel="gas")
        # 10**400 overflows to inf
        response = evaluate_grid(_spec(2, 3, log_temperature_min=3.0, log_temperature_max=400.0), evaluator)
        assert response.raster.detach().tolist() == [0, 3] * 3
        assert len(evaluator.calls) == 3

    def test_nan_density_row_is_mixed(self) -> None:
        evaluator = RecordingEvaluator(channel="gas")
        response = evaluate_grid(_spec(3, 2, log_density_min=float("nan")), evaluator)
        assert response.raster.detach().tolist() == [3] * 6
        assert evaluator.calls == []


class TestFailures:

    def test_evaluator_exception_propagates(self) -> None:
        with pytest.raises(RuntimeError, match="eta out of range"):
            evaluate_grid(_spec(2, 2, radiation_departure_parameter=-1.0), fails_for_negative_eta)

    def test_allocation_failure_propagates(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def no_memory(*args, **kwargs):
            raise MemoryError("cannot allocate raster")

        monkeypatch.setattr("regimemap.controller.evaluation.np.empty", no_memory)
        evaluator = RecordingEvaluator()
        with pytest.raises(MemoryError):
            evaluate_grid(_spec(2, 2), evaluator)
        assert evaluator.calls == []
