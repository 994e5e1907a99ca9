from __future__ import annotations

from typing import Optional


class SchedulingError(ValueError):
    """
    Base class for everything the simulator rejects.

    Subclasses ``ValueError`` so callers that only care about bad input can
    keep catching that.
    """


class InvalidProcessError(SchedulingError):
    def __init__(self, message: str, pid: Optional[str] = None) -> None:
        super().__init__(message)
        self.pid = pid


class DuplicatePidError(InvalidProcessError):
    pass


class InvalidQuantumError(SchedulingError):
    pass


class EmptyWorkloadError(SchedulingError):
    """Raised when there is nothing to schedule."""


class UnknownAlgorithmError(SchedulingError):
    pass


class WorkloadFormatError(SchedulingError):
    pass
