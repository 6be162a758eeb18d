"""Shared test fixtures for regimemap.

Provides a headless Qt application, a started engine that is always shut
down again, and the reference grid parameters.
"""
from __future__ import annotations

from typing import Iterator

import pytest
from PySide6.QtCore import QCoreApplication

from regimemap.app.application import create_app
from regimemap.controller.engine import RegimeGridEngine
from regimemap.model.grid import Composition, GridParameters
from tests.fakes import by_temperature


# ---------------------------------------------------------------------------
# Qt fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def qapp() -> QCoreApplication:
    return create_app(["regimemap-tests"])


@pytest.fixture()
def engine(qapp: QCoreApplication) -> Iterator[RegimeGridEngine]:
    engine = RegimeGridEngine(by_temperature)
    engine.start()
    yield engine
    engine.shutdown()


# ---------------------------------------------------------------------------
# Data fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def solar() -> Composition:
    return Composition(0.7, 0.28, 0.02)


@pytest.fixture()
def small_grid(solar: Composition) -> GridParameters:
    """The 5x5 reference sweep."""
    return GridParameters(
        log_temperature_min=3.0,
        log_temperature_max=7.0,
        log_density_min=-6.0,
        log_density_max=4.0,
        columns=5,
        rows=5,
        composition=solar,
        radiation_departure_parameter=0.0,
    )
