# tests/test_report.py
import io
import json

from jira_subtask_report.parse import Issue, SubTask
from jira_subtask_report.report import issue_row, sort_by_key, write_csv, write_json_lines


def make_issue(key, assignee_name=None, sub_tasks=()):
    data = {
        "id": key.split("-")[1],
        "key": key,
        "fields": {
            "summary": f"Summary of {key}, with comma",
            "assignee": {"displayName": "Current Owner"},
            "created": "2023-03-05T10:15:30.000+0000",
        },
    }
    return Issue(data=data, fields=("summary", "assignee", "created"), sub_tasks=tuple(sub_tasks), assignee_name=assignee_name)


def test_sort_by_key():
    issues = [make_issue("A-3"), make_issue("A-1"), make_issue("A-2")]
    assert [it.key for it in sort_by_key(issues)] == ["A-1", "A-2", "A-3"]


def test_sort_by_key_is_numeric():
    issues = [make_issue("A-10"), make_issue("B-1"), make_issue("A-2"), make_issue("A-1")]
    assert [it.key for it in sort_by_key(issues)] == ["A-1", "A-2", "A-10", "B-1"]


def test_row_has_one_cell_per_requested_field_id():
    base = make_issue("A-1")
    issue = Issue(data=base.data, fields=("summary", "summary", "created"))
    assert issue_row(issue) == ["Summary of A-1 with comma", "Summary of A-1 with comma", "05/Mar/23", "", ""]


def test_write_csv_uses_developer_for_bugs():
    st = SubTask(type="Sub-task", name="Fix it", assignee_name="Dev", total_hours="2h")
    issues = [make_issue("A-1"), make_issue("A-2", assignee_name="Alice", sub_tasks=[st, st])]
    out = io.StringIO()

    count = write_csv(issues, ["Summary", "Assignee", "Created"], out)

    lines = out.getvalue().splitlines()
    assert count == 2
    assert lines[0] == "Summary,Assignee,Created,Sub-tasks,Sub-task hours"
    assert lines[1] == "Summary of A-1 with comma,Current Owner,05/Mar/23,,"
    assert lines[2] == "Summary of A-2 with comma,Alice,05/Mar/23,Sub-task: Fix it (Dev); Sub-task: Fix it (Dev),2h; 2h"


def test_write_json_lines():
    st = SubTask(type="Sub-task", name="Fix it", assignee_name="N/A", total_hours="N/A")
    out = io.StringIO()

    count = write_json_lines([make_issue("A-7", assignee_name="", sub_tasks=[st])], out)

    assert count == 1
    payload = json.loads(out.getvalue())
    assert payload["key"] == "A-7"
    assert payload["fields"]["assignee"] == ""
    assert payload["developer"] == ""
    assert payload["sub_tasks"] == [{"type": "Sub-task", "name": "Fix it", "assignee": "N/A", "total_hours": "N/A"}]
