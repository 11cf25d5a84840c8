"""Exception types raised by the snapshot pipeline."""

from __future__ import annotations


class SnapshotError(Exception):
    """Base class for every error raised by the pipeline."""


class SessionError(SnapshotError):
    """Raised when a session is used before it has been authenticated."""


class ExtractionError(SnapshotError):
    """Raised when a resource cannot be extracted at all."""


class FatalRunError(SnapshotError):
    """Raised for conditions that abort the whole run."""


class AuthenticationError(FatalRunError):
    """Raised when the login cannot be verified."""


class NoProjectsError(FatalRunError):
    """Raised when the dashboard lists no projects."""
