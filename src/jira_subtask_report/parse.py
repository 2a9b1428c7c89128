# src/jira_subtask_report/parse.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .shapes import expect_list, expect_object, expect_str, require

BUG_TYPES = frozenset({"bug", "functional bug", "production issue"})
IN_DEVELOPMENT = "In Development"


@dataclass(frozen=True)
class SubTask:
    type: str
    name: str
    assignee_name: str
    total_hours: str


@dataclass(frozen=True)
class Issue:
    """Ein Suchtreffer plus die beim Suchen angefragten Feld-IDs.

    ``assignee_name`` bleibt None, solange das Issue nicht als Bug erkannt
    wurde; dann steht dort der Entwickler laut Changelog.
    """

    data: Dict[str, Any]
    fields: Tuple[str, ...]
    sub_tasks: Tuple[SubTask, ...] = field(default=())
    assignee_name: Optional[str] = None

    @property
    def key(self) -> str:
        return str(self.data.get("key") or self.data.get("id") or "")


def is_bug(issue_type: str) -> bool:
    return issue_type.lower() in BUG_TYPES


def developer_of_record(raw: Dict[str, Any]) -> str:
    """
    Author of the first history entry that moved the issue to "In Development".
    Liefert "" (nicht "N/A"), wenn es keinen solchen Übergang gibt.
    """
    changelog = expect_object(require(raw, "changelog", "issue"), "issue.changelog")
    histories = expect_list(require(changelog, "histories", "issue.changelog"), "issue.changelog.histories")

    developer = ""
    for h_idx, history in enumerate(histories):
        where = f"issue.changelog.histories[{h_idx}]"
        history = expect_object(history, where)
        items = expect_list(require(history, "items", where), f"{where}.items")
        for item in items:
            item = expect_object(item, f"{where}.items[]")
            if item.get("toString") == IN_DEVELOPMENT:
                author = expect_object(require(history, "author", where), f"{where}.author")
                developer = expect_str(require(author, "displayName", f"{where}.author"), f"{where}.author.displayName")
                break
        if developer:
            break
    return developer
