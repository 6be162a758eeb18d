"""
Exception Hierarchy
===================
Errors raised by the regime map engine.

Stale responses are NOT errors and have no exception here; they are dropped
by the dispatcher.
"""


class RegimeMapError(Exception):
    """Base class for all regime map engine errors."""


class SequenceRegressionError(RegimeMapError):
    """A response carried a sequence number that was never issued."""

    def __init__(self, sequence_number: int, latest_issued: int) -> None:
        super().__init__(
            f"Response sequence number {sequence_number} exceeds the latest issued "
            f"sequence number {latest_issued}."
        )
        self.sequence_number = sequence_number
        self.latest_issued = latest_issued


class ProtocolError(RegimeMapError):
    """A request or response message is malformed."""


class BufferDetachedError(RegimeMapError):
    """A raster buffer was accessed after its ownership moved on."""


class EvaluatorLoadError(RegimeMapError):
    """The configured EOS evaluator could not be imported."""
