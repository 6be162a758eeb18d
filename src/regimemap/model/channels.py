"""
Channel Codes
=============
One-byte classification of which pressure mechanism dominates a grid cell.

The external EOS model names its dominant channel with a string. Anything the
engine does not recognise (ties, new variants, garbage) becomes MIXED so that
an unexpected result is never reported as one of the named channels.
"""
from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import Any, Dict

import numpy as np


class PressureChannel(StrEnum):
    """Dominant pressure channel names as reported by the EOS model."""
    GAS = "gas"
    RADIATION = "radiation"
    DEGENERACY = "degeneracy"


class ChannelCode(IntEnum):
    """Raster byte values."""
    GAS = 0
    RADIATION = 1
    DEGENERACY = 2
    MIXED = 3


RASTER_DTYPE = np.uint8

_CODE_BY_NAME: Dict[str, ChannelCode] = {
    PressureChannel.GAS.value: ChannelCode.GAS,
    PressureChannel.RADIATION.value: ChannelCode.RADIATION,
    PressureChannel.DEGENERACY.value: ChannelCode.DEGENERACY,
}


def channel_code(dominant: Any) -> ChannelCode:
    """
    Map an evaluator's dominant channel to its raster code.

    Args:
        dominant: Value of ``dominant_pressure_channel`` (normally a string).

    Returns:
        The matching ChannelCode, or ChannelCode.MIXED for anything else.
    """
    if not isinstance(dominant, str):
        return ChannelCode.MIXED
    return _CODE_BY_NAME.get(dominant, ChannelCode.MIXED)
