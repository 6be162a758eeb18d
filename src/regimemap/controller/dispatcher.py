"""
Request Dispatcher
==================
Caller-side sequencing of grid requests and staleness filtering of responses.

There is no real cancellation: once the worker starts a grid it finishes it.
Instead every request is tagged with a sequence number and only the response
for the most recently issued number is accepted. Older responses are dropped
after the fact. This is the normal outcome when a parameter changes faster
than one grid can be evaluated.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, TYPE_CHECKING

from regimemap.errors import SequenceRegressionError
from regimemap.model.messages import AcceptedResult

if TYPE_CHECKING:
    from regimemap.model.grid import GridParameters, GridSpec
    from regimemap.model.messages import Response

logger = logging.getLogger(__name__)


class RequestDispatcher:
    """
    Issues sequence-numbered requests and decides which responses are fresh.

    Not thread-safe; use it from the caller thread only.
    """

    def __init__(self, send: Callable[[GridSpec], None]) -> None:
        """
        Args:
            send: Hands a stamped spec to the computation channel. Must not block.
        """
        self._send = send
        self._latest_issued = 0
        self.accepted_count = 0
        self.dropped_count = 0

    @property
    def latest_issued_sequence_number(self) -> int:
        return self._latest_issued

    def dispatch(self, parameters: GridParameters) -> int:
        """
        Stamp the next sequence number onto 'parameters' and send it.

        Returns:
            The sequence number assigned to this request.
        """
        self._latest_issued += 1
        spec = parameters.stamp(self._latest_issued)
        self._send(spec)
        return spec.sequence_number

    def on_response(self, response: Response) -> Optional[AcceptedResult]:
        """
        Filter a response from the computation channel.

        Args:
            response: The channel's response. Its raster is consumed either way.

        Returns:
            The AcceptedResult if the response answers the latest request,
            None if it is stale and was dropped.

        Raises:
            SequenceRegressionError: If the response claims a sequence number
                that was never issued.
        """
        seq = response.sequence_number

        if seq > self._latest_issued:
            logger.critical(f"Protocol violation: response #{seq} but latest issued is #{self._latest_issued}")
            raise SequenceRegressionError(seq, self._latest_issued)

        if seq < self._latest_issued:
            response.raster.release()
            self.dropped_count += 1
            logger.debug(f"Dropped stale grid #{seq} (latest #{self._latest_issued})")
            return None

        self.accepted_count += 1
        return AcceptedResult(
            grid=response.raster.detach(),
            columns=response.columns,
            rows=response.rows,
            elapsed_ms=response.elapsed_ms,
            sequence_number=seq,
        )
