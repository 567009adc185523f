"""Exception hierarchy for the report engine and its API client."""

from __future__ import annotations


class SqlAuditError(Exception):
    """Base class for every error surfaced to the user."""


class ValidationError(SqlAuditError):
    """Bad input detected before any network call (file type, size, blank path)."""


class TransportError(SqlAuditError):
    """Network failure or non-success response from the audit service."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ExportError(SqlAuditError):
    """Both the remote render and the local fallback failed."""


class ClipboardError(SqlAuditError):
    """Neither the native clipboard nor the terminal fallback accepted the text."""
