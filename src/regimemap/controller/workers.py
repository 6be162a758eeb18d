"""
Background Workers (Threading)
==============================
This module contains the computation channel: a worker object living on its
own QThread that evaluates regime grids.

Why is this file needed?
------------------------
1. Responsiveness: If we evaluate the grid on the main thread, the GUI freezes
   while a slider is dragged. The channel pushes the sweep to a background
   thread.
2. Isolation: Requests and responses only cross the thread boundary as Qt
   signals carrying immutable GridSpecs and Responses. Nothing mutable is
   shared, so the evaluation loop needs no locks.
3. Ordering: The worker thread runs a single event loop. Queued requests are
   processed one at a time, strictly in the order they were submitted.

Classes:
    GridWorker: Runs the evaluation loop for one request at a time.
    ComputationChannel: Owns the worker thread; the caller-side end of the channel.
"""
from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

from PySide6.QtCore import QObject, QThread, Signal, Slot

from regimemap.controller.evaluation import evaluate_grid

if TYPE_CHECKING:
    from regimemap.model.grid import GridSpec
    from regimemap.model.messages import Response
    from regimemap.physics.evaluator import EosEvaluator

logger = logging.getLogger(__name__)


class GridWorker(QObject):
    # Signals back to the caller thread
    response_ready = Signal(object)  # Response
    request_failed = Signal(object, str)  # (sequence_number, message)

    def __init__(self, evaluator: EosEvaluator) -> None:
        super().__init__()
        self._evaluator = evaluator

    @Slot(object)
    def evaluate(self, spec: GridSpec) -> None:
        seq = spec.sequence_number
        try:
            response = evaluate_grid(spec, self._evaluator)
        except MemoryError as e:
            # No retry.
            logger.error(f"Raster allocation failed for grid #{seq} ({spec.columns}x{spec.rows}): {e}")
            self.request_failed.emit(seq, f"Raster allocation failed: {e}")
            return
        except Exception as e:
            logger.exception(f"Error in GridWorker while evaluating grid #{seq}")
            self.request_failed.emit(seq, str(e))
            return

        self.response_ready.emit(response)


class ComputationChannel(QObject):
    """
    Caller-side end of the computation channel.

    Lives on the thread that created it; re-emits the worker's signals there.
    """
    response_ready = Signal(object)  # Response
    request_failed = Signal(object, str)

    _request_posted = Signal(object)  # GridSpec, queued to the worker thread

    def __init__(self, evaluator: EosEvaluator, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._thread = QThread()
        self._thread.setObjectName("regimemap-channel")

        self._worker = GridWorker(evaluator)
        self._worker.moveToThread(self._thread)

        # Receivers live in different threads, so Qt queues every delivery.
        self._request_posted.connect(self._worker.evaluate)
        self._worker.response_ready.connect(self._on_worker_response)
        self._worker.request_failed.connect(self._on_worker_failure)
        self._thread.finished.connect(self._worker.deleteLater)

    def start(self) -> None:
        if not self._thread.isRunning():
            logger.info("Starting computation channel thread...")
            self._thread.start()

    def is_running(self) -> bool:
        return self._thread.isRunning()

    def submit(self, spec: GridSpec) -> None:
        """Queue a request. Returns immediately; the caller keeps no hold on 'spec'."""
        logger.debug(f"Submitting grid #{spec.sequence_number} ({spec.columns}x{spec.rows})")
        self._request_posted.emit(spec)

    def shutdown(self) -> None:
        """
        Stop the worker thread.

        Blocks until the grid currently being evaluated (if any) is finished;
        a running evaluation is never interrupted. Queued requests are dropped.
        """
        if self._thread.isRunning():
            logger.info("Stopping computation channel thread...")
            self._thread.quit()
            self._thread.wait()

    @Slot(object)
    def _on_worker_response(self, response: Response) -> None:
        self.response_ready.emit(response)

    @Slot(object, str)
    def _on_worker_failure(self, sequence_number: int, message: str) -> None:
        self.request_failed.emit(sequence_number, message)
