# src/jira_subtask_report/errors.py
from __future__ import annotations

from typing import Optional


class JiraReportError(RuntimeError):
    """Basis für alle Fehler aus diesem Paket."""


class TransportError(JiraReportError):
    """Connection failure or non-2xx response from the Jira REST API."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(JiraReportError, ValueError):
    """Response body is not JSON or does not have the expected shape."""


__all__ = [
    "JiraReportError",
    "TransportError",
    "MalformedResponseError",
]
