"""
Regime Grid Engine
==================
Pairs one computation channel with one request dispatcher.

Why is this file needed?
------------------------
1. Wiring: The channel's responses must pass through the dispatcher's
   staleness check before anything reaches the rendering layer.
2. Single entry point: The UI only calls 'dispatch(parameters)' and listens to
   'result_accepted'. It never sees sequence numbers of stale grids.
"""
from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

from PySide6.QtCore import QObject, Signal, Slot

from regimemap.controller.dispatcher import RequestDispatcher
from regimemap.controller.workers import ComputationChannel
from regimemap.errors import SequenceRegressionError

if TYPE_CHECKING:
    from regimemap.model.grid import GridParameters
    from regimemap.model.messages import Response
    from regimemap.physics.evaluator import EosEvaluator

logger = logging.getLogger(__name__)


class RegimeGridEngine(QObject):
    result_accepted = Signal(object)  # AcceptedResult
    request_failed = Signal(object, str)  # (sequence_number, message)
    protocol_error = Signal(str)

    def __init__(self, evaluator: EosEvaluator, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.channel = ComputationChannel(evaluator, parent=self)
        self.dispatcher = RequestDispatcher(send=self.channel.submit)

        self.channel.response_ready.connect(self._on_response)
        self.channel.request_failed.connect(self._on_failure)

    @property
    def latest_issued_sequence_number(self) -> int:
        return self.dispatcher.latest_issued_sequence_number

    def start(self) -> None:
        self.channel.start()

    def shutdown(self) -> None:
        self.channel.shutdown()
        logger.info(
            f"Engine stopped: {self.dispatcher.accepted_count} grids accepted, "
            f"{self.dispatcher.dropped_count} stale grids dropped."
        )

    def dispatch(self, parameters: GridParameters) -> int:
        """Send a new grid request. Never blocks; returns its sequence number."""
        return self.dispatcher.dispatch(parameters)

    @Slot(object)
    def _on_response(self, response: Response) -> None:
        try:
            result = self.dispatcher.on_response(response)
        except SequenceRegressionError as e:
            self.protocol_error.emit(str(e))
            raise

        if result is None:
            return

        logger.info(
            f"Grid #{result.sequence_number} ready ({result.columns}x{result.rows}, "
            f"{result.elapsed_ms:.1f} ms)"
        )
        self.result_accepted.emit(result)

    @Slot(object, str)
    def _on_failure(self, sequence_number: int, message: str) -> None:
        logger.error(f"Grid #{sequence_number} failed: {message}")
        self.request_failed.emit(sequence_number, message)
