from __future__ import annotations

import numpy as np
import numpy.typing as npt


def log_axis(minimum: float, maximum: float, count: int) -> npt.NDArray[np.float64]:
    """
    Sample points of a log10 axis: minimum + i * (maximum - minimum) / max(1, count - 1).

    With a single sample every point sits at 'minimum'.
    """
    step = (maximum - minimum) / max(1, count - 1)
    return minimum + np.arange(count, dtype=np.float64) * step


def to_linear(log_values: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """10**x, with overflow giving inf instead of a warning."""
    with np.errstate(over="ignore"):
        return np.power(10.0, log_values)
