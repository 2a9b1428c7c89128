# src/jira_subtask_report/shapes.py
"""Explicit shape checks for decoded JSON.

Jira liefert untypisiertes JSON; statt blind zu indizieren prüfen wir an
jeder Zugriffsstelle den Typ und melden Abweichungen mit dem JSON-Pfad.
"""
from __future__ import annotations

from typing import Any, Dict, List

from .errors import MalformedResponseError


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def expect_object(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedResponseError(f"{where}: expected object, got {_type_name(value)}")
    return value


def expect_list(value: Any, where: str) -> List[Any]:
    if not isinstance(value, list):
        raise MalformedResponseError(f"{where}: expected array, got {_type_name(value)}")
    return value


def expect_str(value: Any, where: str) -> str:
    if not isinstance(value, str):
        raise MalformedResponseError(f"{where}: expected string, got {_type_name(value)}")
    return value


def expect_bool(value: Any, where: str) -> bool:
    if not isinstance(value, bool):
        raise MalformedResponseError(f"{where}: expected bool, got {_type_name(value)}")
    return value


def require(obj: Dict[str, Any], key: str, where: str) -> Any:
    """Pflichtschlüssel lesen; fehlt er, ist die Antwort kaputt."""
    if key not in obj:
        raise MalformedResponseError(f"{where}: missing key {key!r}")
    return obj[key]
