# src/jira_subtask_report/extract.py
"""Flatten Jira field values into display strings."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from .errors import MalformedResponseError

NOT_AVAILABLE = "N/A"

# z.B. 2023-03-05T10:15:30.000+0000; Sekundenbruchteile sind optional
CREATED_INPUT_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z")
CREATED_OUTPUT_FORMAT = "%d/%b/%y"

# Welcher Schlüssel in einem Objekt-Wert den Anzeigetext trägt
NESTED_KEYS: Dict[str, str] = {
    "assignee": "displayName",
    "reporter": "displayName",
    "issuetype": "name",
    "status": "name",
    "priority": "name",
    "timetracking": "originalEstimate",
}
DEFAULT_NESTED_KEY = "value"


def nested_key(field_name: str) -> str:
    return NESTED_KEYS.get(field_name.lower(), DEFAULT_NESTED_KEY)


def format_created(raw: Any) -> str:
    if not isinstance(raw, str):
        raise MalformedResponseError(f"created: expected timestamp string, got {raw!r}")
    for fmt in CREATED_INPUT_FORMATS:
        try:
            ts = datetime.strptime(raw, fmt)
        except ValueError:
            continue
        return ts.strftime(CREATED_OUTPUT_FORMAT)
    raise MalformedResponseError(f"created: cannot parse timestamp {raw!r}")


def _scalar_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        raise MalformedResponseError(f"expected scalar value, got {type(value).__name__}")
    return str(value)


def value_text(value: Any, field_name: str) -> str:
    """Dispatch on the JSON shape of a single field value."""
    if isinstance(value, list):
        if not value:
            return ""
        first = value[0]
        if isinstance(first, dict):
            return _scalar_text(first.get(DEFAULT_NESTED_KEY))
        return _scalar_text(first)
    if isinstance(value, dict):
        return _scalar_text(value.get(nested_key(field_name)))
    return _scalar_text(value)


def extract_field(issue: Dict[str, Any], field_name: str, *, strict_dates: bool = True) -> str:
    """
    Display string for ``issue["fields"][field_name]``.

    Fehlt "fields" oder das Feld selbst, kommt "N/A" zurück. Kommas werden
    entfernt, damit die Werte gefahrlos in kommagetrennte Ausgaben passen.
    """
    fields = issue.get("fields")
    if not isinstance(fields, dict) or field_name not in fields:
        return NOT_AVAILABLE

    raw = fields[field_name]
    if field_name.lower() == "created":
        try:
            return format_created(raw)
        except MalformedResponseError:
            if strict_dates:
                raise
            return NOT_AVAILABLE

    return value_text(raw, field_name).replace(",", "")
