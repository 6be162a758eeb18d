"""
EOS Evaluator Interface
=======================
The per-point classification function is supplied by an external physics
library. This module only describes what the engine passes in, what it reads
back, and how a configured evaluator is located.

Why is this file needed?
------------------------
1. Contract: 'EosInput' and 'EosEvaluator' pin down the call made once per
   grid cell by the evaluation loop.
2. Configuration: 'load_evaluator' resolves a "package.module:function" path
   (from the CLI or the REGIMEMAP_EVALUATOR environment variable).
"""
from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from typing import Any, Protocol

from regimemap.errors import EvaluatorLoadError
from regimemap.model.grid import Composition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EosInput:
    """Physical state handed to the EOS model for one grid cell."""
    temperature_k: float
    density_g_per_cm3: float
    composition: Composition
    radiation_departure_eta: float


class EosState(Protocol):
    dominant_pressure_channel: Any


class EosEvaluator(Protocol):
    def __call__(self, state_input: EosInput) -> EosState: ...


def load_evaluator(path: str) -> EosEvaluator:
    """
    Import an evaluator from a "package.module:attribute" path.

    Args:
        path: Module path and attribute name separated by a colon.

    Returns:
        The callable found at that path.

    Raises:
        EvaluatorLoadError: If the path is malformed, cannot be imported or
            does not name a callable.
    """
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise EvaluatorLoadError(f"Evaluator path must look like 'package.module:function', got '{path}'.")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise EvaluatorLoadError(f"Cannot import evaluator module '{module_name}': {e}") from e

    target: Any = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise EvaluatorLoadError(f"Module '{module_name}' has no attribute '{attribute}'.") from e

    if not callable(target):
        raise EvaluatorLoadError(f"Evaluator '{path}' is not callable.")

    logger.info(f"Using EOS evaluator: {path}")
    return target
