from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Dict, Optional, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import QObject, Signal, Slot

from regimemap import config
from regimemap.model.channels import ChannelCode
from regimemap.model.grid import Composition, GridParameters

if TYPE_CHECKING:
    import numpy.typing as npt

    from regimemap.controller.engine import RegimeGridEngine
    from regimemap.model.messages import AcceptedResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegimeMapConfig:
    """Sweep window and resolution of the regime map."""
    log_t_min: float = config.DEFAULT_LOG_T_MIN
    log_t_max: float = config.DEFAULT_LOG_T_MAX
    log_rho_min: float = config.DEFAULT_LOG_RHO_MIN
    log_rho_max: float = config.DEFAULT_LOG_RHO_MAX
    x_cells: int = config.DEFAULT_COLUMNS
    y_cells: int = config.DEFAULT_ROWS

    def parameters(self, composition: Composition, eta: float) -> GridParameters:
        return GridParameters(
            log_temperature_min=self.log_t_min,
            log_temperature_max=self.log_t_max,
            log_density_min=self.log_rho_min,
            log_density_max=self.log_rho_max,
            columns=self.x_cells,
            rows=self.y_cells,
            composition=composition,
            radiation_departure_parameter=eta,
        )


def composition_key(composition: Composition, eta: float) -> str:
    """Cache key of a grid. Temperature/density of the current state are not part of it."""
    return "|".join(
        f"{value:.6f}"
        for value in (
            composition.hydrogen_mass_fraction,
            composition.helium_mass_fraction,
            composition.metal_mass_fraction,
            eta,
        )
    )


def channel_fractions(grid: npt.NDArray[np.uint8]) -> Dict[ChannelCode, float]:
    """Fraction of cells per channel code."""
    counts = np.bincount(grid, minlength=len(ChannelCode))
    total = max(1, int(grid.size))
    return {code: float(counts[code]) / total for code in ChannelCode}


class RegimeMapStore(QObject):
    """
    Regime map state with a one-entry grid cache.

    The grid only depends on composition and eta. Moving the temperature or
    density marker re-uses the cached grid; during a slider drag the caller
    can defer the rebuild entirely.
    """
    grid_changed = Signal(object)  # AcceptedResult

    def __init__(self, engine: RegimeGridEngine, map_config: Optional[RegimeMapConfig] = None) -> None:
        super().__init__()
        self.engine = engine
        self.map_config = map_config or RegimeMapConfig()

        self._cached_key: Optional[str] = None
        self._cached_result: Optional[AcceptedResult] = None
        self._pending_keys: Dict[int, str] = {}

        self.engine.result_accepted.connect(self._on_result_accepted)
        self.engine.request_failed.connect(self._on_request_failed)

    @property
    def cached_result(self) -> Optional[AcceptedResult]:
        return self._cached_result

    def request_grid(self, composition: Composition, eta: float, defer_rebuild: bool = False) -> bool:
        """
        Make sure a grid for (composition, eta) is, or will be, shown.

        Args:
            composition: Mass fractions.
            eta: Radiation departure parameter.
            defer_rebuild: Skip any new computation (e.g. while a slider is dragged).

        Returns:
            True if a new grid request was dispatched.
        """
        key = composition_key(composition, eta)

        if self._cached_result is not None and self._cached_key == key:
            # Any grid still in flight is for parameters that were left
            self._pending_keys.clear()
            self.grid_changed.emit(self._cached_result)
            return False

        if defer_rebuild:
            logger.debug(f"Grid rebuild deferred for key {key}")
            return False

        seq = self.engine.dispatch(self.map_config.parameters(composition, eta))
        # Only the newest request can ever be accepted
        self._pending_keys = {seq: key}
        return True

    def invalidate(self) -> None:
        self._cached_key = None
        self._cached_result = None

    @Slot(object)
    def _on_result_accepted(self, result: AcceptedResult) -> None:
        key = self._pending_keys.pop(result.sequence_number, None)
        if key is None:
            logger.debug(f"Ignoring grid #{result.sequence_number}: superseded by a cached grid")
            return

        self._cached_key = key
        self._cached_result = result
        self.grid_changed.emit(result)

    @Slot(object, str)
    def _on_request_failed(self, sequence_number: int, message: str) -> None:
        self._pending_keys.pop(sequence_number, None)
