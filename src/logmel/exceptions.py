"""
Exceptions raised by the log-mel pipeline.
"""

from typing import Optional


class LogMelError(Exception):
    """Base class for all log-mel pipeline errors."""


class InvalidDimensionError(LogMelError, ValueError):
    """A size parameter or the filterbank shape is inconsistent with the call."""


class WorkerFailureError(LogMelError, RuntimeError):
    """A frame worker did not finish; the output matrix is discarded."""

    def __init__(self, worker_id: int, cause: Optional[BaseException] = None):
        self.worker_id = worker_id
        self.cause = cause
        message = f"Worker {worker_id} failed"
        if cause is not None:
            message += f": {type(cause).__name__}: {cause}"
        super().__init__(message)
