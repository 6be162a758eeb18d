"""
Channel Messages
================
Response framing and raster ownership for the computation channel.

Why is this file needed?
------------------------
1. Ownership: The raster is handed from the worker thread to the caller
   without copying. 'RasterBuffer' makes that hand-off a move: once the
   array has been detached, the buffer is empty and cannot be read again.
2. Framing: 'Response' is the single message the worker sends back for each
   request; 'AcceptedResult' is what survives the staleness check and goes
   on to the rendering layer.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, TYPE_CHECKING

from regimemap.errors import BufferDetachedError

if TYPE_CHECKING:
    import numpy as np
    import numpy.typing as npt


class RasterBuffer:
    """Single-owner holder of a channel-code raster."""

    __slots__ = ("_array",)

    def __init__(self, array: npt.NDArray[np.uint8]) -> None:
        self._array: Optional[npt.NDArray[np.uint8]] = array

    @property
    def is_detached(self) -> bool:
        return self._array is None

    def __len__(self) -> int:
        if self._array is None:
            raise BufferDetachedError("Raster buffer has already been transferred.")
        return int(self._array.size)

    def detach(self) -> npt.NDArray[np.uint8]:
        """Move the raster out. The buffer is empty afterwards."""
        array = self._array
        if array is None:
            raise BufferDetachedError("Raster buffer has already been transferred.")
        self._array = None
        return array

    def release(self) -> None:
        """Drop the raster without handing it on."""
        self._array = None

    def __repr__(self) -> str:
        if self._array is None:
            return "RasterBuffer(<detached>)"
        return f"RasterBuffer(size={self._array.size})"


@dataclass(frozen=True)
class Response:
    """Result of one grid evaluation, as produced by the worker."""
    raster: RasterBuffer
    columns: int
    rows: int
    elapsed_ms: float
    sequence_number: int

    def to_message(self) -> Dict[str, Any]:
        """
        Encode as the response message of the channel protocol.

        The raster is moved into the message; this response is left
        without a raster.
        """
        return {
            "grid": self.raster.detach(),
            "cols": self.columns,
            "rows": self.rows,
            "elapsed": self.elapsed_ms,
            "seq": self.sequence_number,
        }


@dataclass(frozen=True)
class AcceptedResult:
    """A fresh response, delivered to the rendering layer."""
    grid: npt.NDArray[np.uint8]
    columns: int
    rows: int
    elapsed_ms: float
    sequence_number: int

    def as_image(self) -> npt.NDArray[np.uint8]:
        """Row-major (rows, columns) view of the raster. No copy."""
        return self.grid.reshape(self.rows, self.columns)
