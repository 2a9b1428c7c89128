# src/jira_subtask_report/report.py
"""Render aggregated issues as CSV or JSON lines."""
from __future__ import annotations

import csv
import json
import re
from typing import Dict, Iterable, List, Sequence, TextIO, Tuple

from .extract import extract_field
from .parse import Issue, SubTask

SUB_TASK_COLUMNS = ("Sub-tasks", "Sub-task hours")


ISSUE_KEY_RE = re.compile(r"^([A-Z][A-Z0-9_]*)-(\d+)$")


def issue_sort_key(key: str) -> Tuple[str, int, str]:
    """A-2 vor A-10; Keys ohne PROJ-123-Format hinten, alphabetisch."""
    m = ISSUE_KEY_RE.match(key)
    if m:
        return (m.group(1), int(m.group(2)), "")
    return ("\uffff", 0, key)


def sort_by_key(issues: Iterable[Issue]) -> List[Issue]:
    """Worker liefern in beliebiger Reihenfolge; für die Ausgabe nach Key sortieren."""
    return sorted(issues, key=lambda it: issue_sort_key(it.key))


def field_values(issue: Issue, *, strict_dates: bool = True) -> Dict[str, str]:
    values = {fid: extract_field(issue.data, fid, strict_dates=strict_dates) for fid in issue.fields}
    # Bei Bugs zählt der Entwickler aus dem Changelog, nicht der aktuelle Assignee
    if issue.assignee_name is not None and "assignee" in values:
        values["assignee"] = issue.assignee_name.replace(",", "")
    return values


def _sub_task_text(st: SubTask) -> str:
    return f"{st.type}: {st.name} ({st.assignee_name})"


def issue_row(issue: Issue, *, strict_dates: bool = True) -> List[str]:
    # eine Zelle pro angefragter Feld-ID, auch bei doppelten IDs
    values = field_values(issue, strict_dates=strict_dates)
    row = [values[fid] for fid in issue.fields]
    row.append("; ".join(_sub_task_text(st) for st in issue.sub_tasks))
    row.append("; ".join(st.total_hours for st in issue.sub_tasks))
    return row


def write_csv(issues: Iterable[Issue], headers: Sequence[str], fh: TextIO, *, strict_dates: bool = True) -> int:
    writer = csv.writer(fh)
    writer.writerow([*headers, *SUB_TASK_COLUMNS])
    count = 0
    for issue in issues:
        writer.writerow(issue_row(issue, strict_dates=strict_dates))
        count += 1
    return count


def write_json_lines(issues: Iterable[Issue], fh: TextIO, *, strict_dates: bool = True) -> int:
    count = 0
    for issue in issues:
        payload = {
            "key": issue.key,
            "fields": field_values(issue, strict_dates=strict_dates),
            "developer": issue.assignee_name,
            "sub_tasks": [
                {
                    "type": st.type,
                    "name": st.name,
                    "assignee": st.assignee_name,
                    "total_hours": st.total_hours,
                }
                for st in issue.sub_tasks
            ],
        }
        fh.write(json.dumps(payload, ensure_ascii=False) + "\n")
        count += 1
    return count
