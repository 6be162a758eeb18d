"""
Configuration & Defaults
========================
This module serves as the central registry for global constants.

Why is this file needed?
------------------------
1. Defaults: The regime map sweeps a fixed (log T, log rho) window unless the
   caller asks otherwise. Those bounds live here instead of being repeated.
2. Collaborators: The EOS model is external. Its import path is read from the
   environment so that the engine never hardcodes a physics package.

Exports:
    DEFAULT_LOG_T_MIN / DEFAULT_LOG_T_MAX (float): log10(T / K) window.
    DEFAULT_LOG_RHO_MIN / DEFAULT_LOG_RHO_MAX (float): log10(rho / (g cm^-3)) window.
    DEFAULT_COLUMNS / DEFAULT_ROWS (int): Grid resolution.
    EVALUATOR_ENV_VAR (str): Environment variable holding "module:function".
"""
import os
from typing import Optional

# Global Constants
DEFAULT_LOG_T_MIN: float = 3.0
DEFAULT_LOG_T_MAX: float = 9.0
DEFAULT_LOG_RHO_MIN: float = -10.0
DEFAULT_LOG_RHO_MAX: float = 10.0
DEFAULT_COLUMNS: int = 100
DEFAULT_ROWS: int = 80

# Solar-like mixture
DEFAULT_X: float = 0.7
DEFAULT_Y: float = 0.28
DEFAULT_Z: float = 0.02

EVALUATOR_ENV_VAR: str = "REGIMEMAP_EVALUATOR"


def get_evaluator_path(override: Optional[str] = None) -> Optional[str]:
    """
    Resolve the EOS evaluator path: explicit override first, then the environment.
    """
    if override:
        return override
    return os.environ.get(EVALUATOR_ENV_VAR) or None
