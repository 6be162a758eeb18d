"""
Regime Grid Evaluation Loop
===========================
Classifies every cell of a (log T, log rho) sweep by its dominant pressure
channel.

Why is this file needed?
------------------------
1. Physics: It maps grid indices to temperature and density and calls the
   external EOS model once per cell.
2. Packing: It writes one channel-code byte per cell into a flat row-major
   raster (index = row * columns + column).
3. Observability: It measures the wall-clock time of the whole sweep.

Note: This module should be pure Python/NumPy and should NOT import PySide6.
It runs inside the worker thread and holds no state between calls.
"""
from __future__ import annotations

import logging
import math
import time
from typing import TYPE_CHECKING

import numpy as np

from regimemap.model.channels import RASTER_DTYPE, ChannelCode, channel_code
from regimemap.model.messages import RasterBuffer, Response
from regimemap.physics.evaluator import EosInput
from regimemap.utils import log_axis, to_linear

if TYPE_CHECKING:
    from regimemap.model.grid import GridSpec
    from regimemap.physics.evaluator import EosEvaluator

logger = logging.getLogger(__name__)


def _is_physical(value: float) -> bool:
    return math.isfinite(value) and value > 0.0


def evaluate_grid(spec: GridSpec, evaluator: EosEvaluator) -> Response:
    """
    Evaluate a full regime grid.

    Args:
        spec: The stamped grid request.
        evaluator: EOS model returning an object with 'dominant_pressure_channel'.

    Returns:
        Response owning a freshly allocated raster of columns * rows bytes.

    Raises:
        MemoryError: If the raster cannot be allocated.
        Exception: Whatever the evaluator raises is propagated unchanged.
    """
    t0 = time.perf_counter()

    columns, rows = spec.columns, spec.rows
    grid = np.empty(columns * rows, dtype=RASTER_DTYPE)

    temperatures = to_linear(log_axis(spec.log_temperature_min, spec.log_temperature_max, columns))
    densities = to_linear(log_axis(spec.log_density_min, spec.log_density_max, rows))

    composition = spec.composition
    eta = spec.radiation_departure_parameter

    for j in range(rows):
        density = float(densities[j])
        density_ok = _is_physical(density)
        offset = j * columns
        for i in range(columns):
            temperature = float(temperatures[i])
            if not (density_ok and _is_physical(temperature)):
                grid[offset + i] = ChannelCode.MIXED
                continue

            state = evaluator(
                EosInput(
                    temperature_k=temperature,
                    density_g_per_cm3=density,
                    composition=composition,
                    radiation_departure_eta=eta,
                )
            )
            grid[offset + i] = channel_code(getattr(state, "dominant_pressure_channel", None))

    elapsed_ms = (time.perf_counter() - t0) * 1000.0
    logger.debug(f"Grid #{spec.sequence_number} ({columns}x{rows}) evaluated in {elapsed_ms:.1f} ms")

    return Response(
        raster=RasterBuffer(grid),
        columns=columns,
        rows=rows,
        elapsed_ms=elapsed_ms,
        sequence_number=spec.sequence_number,
    )
