"""Errors raised by the Tortoise VPA manager."""

from typing import Optional


class VPAError(Exception):
    """A VPA operation failed."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class VPANotFoundError(VPAError):
    """The VPA does not exist."""

    def __init__(self, message: str):
        super().__init__(message, status=404)


class VPAConflictError(VPAError):
    """The VPA was modified since it was read (resourceVersion mismatch)."""

    def __init__(self, message: str):
        super().__init__(message, status=409)


class VPACreateError(VPAError):
    """
    Creating a VPA failed.

    The tortoise may already have been updated (e.g. a new entry in its
    status targets), so it's handed back for the caller to decide whether
    to persist it.
    """

    def __init__(self, message: str, tortoise, status: Optional[int] = None):
        super().__init__(message, status=status)
        self.tortoise = tortoise


class TortoiseError(Exception):
    """Reading or writing a Tortoise failed."""


def is_not_found(err: BaseException) -> bool:
    """Check if an error (or the error it was raised from) is a not found."""
    while err is not None:
        if isinstance(err, VPANotFoundError):
            return True
        if isinstance(err, VPAError) and err.status == 404:
            return True
        err = err.__cause__
    return False


def is_conflict(err: BaseException) -> bool:
    """Check if an error (or the error it was raised from) is a conflict."""
    while err is not None:
        if isinstance(err, VPAConflictError):
            return True
        err = err.__cause__
    return False
