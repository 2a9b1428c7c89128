# tests/test_main.py
from __future__ import annotations
import json

import httpx

from jira_subtask_report import main as cli
from jira_subtask_report.config import Settings


def handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/rest/api/2/field":
        return httpx.Response(200, json=[
            {"name": "Summary", "id": "summary", "custom": False},
            {"name": "Team", "id": "customfield_10500", "custom": True},
        ])
    if path == "/rest/api/2/search":
        assert request.url.params["fields"] == "summary,customfield_10500,assignee"
        return httpx.Response(200, json={"issues": [
            {"id": "2", "key": "A-2", "fields": {"summary": "Second", "customfield_10500": {"value": "Blue"}, "assignee": {"displayName": "Owner"}}},
            {"id": "1", "key": "A-1", "fields": {"summary": "First", "customfield_10500": [{"value": "Red"}], "assignee": None}},
        ]})
    if path == "/rest/api/2/issue/1":
        return httpx.Response(200, json={"id": "1", "fields": {"issuetype": {"name": "Story"}, "subtasks": []}, "changelog": {"histories": []}})
    if path == "/rest/api/2/issue/2":
        return httpx.Response(200, json={
            "id": "2",
            "fields": {"issuetype": {"name": "Production Issue"}, "subtasks": []},
            "changelog": {"histories": [{"author": {"displayName": "Alice"}, "items": [{"toString": "In Development"}]}]},
        })
    return httpx.Response(404)


def patch_settings(monkeypatch):
    settings = Settings(base_url="https://jira.local", auth_token="t", timeout_s=5.0, max_workers=2)
    original_build_client = Settings.build_client

    def build_client(self, transport: httpx.BaseTransport | None = None) -> httpx.Client:
        return original_build_client(self, transport=transport or httpx.MockTransport(handler))

    monkeypatch.setattr(Settings, "build_client", build_client)
    monkeypatch.setattr(Settings, "from_env", classmethod(lambda cls, env_path=None: settings))


def test_report_csv_sorted_by_key(monkeypatch, tmp_path):
    patch_settings(monkeypatch)
    out = tmp_path / "report.csv"

    rc = cli.main(["report", "--jql", "project = A", "--fields", "summary,Team,assignee", "--out", str(out)])

    assert rc == 0
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines == [
        "summary,Team,assignee,Sub-tasks,Sub-task hours",
        "First,Red,,,",
        "Second,Blue,Alice,,",
    ]


def test_fields_command_prints_catalog(monkeypatch, capsys):
    patch_settings(monkeypatch)
    assert cli.main(["fields"]) == 0
    assert json.loads(capsys.readouterr().out) == {"team": "customfield_10500"}


def test_report_without_jql(monkeypatch):
    patch_settings(monkeypatch)
    assert cli.main(["report"]) == 2


def test_report_drops_names_resolving_to_same_field(monkeypatch, tmp_path):
    patch_settings(monkeypatch)
    out = tmp_path / "report.csv"

    rc = cli.main(["report", "--jql", "project = A", "--fields", "Summary,Team,team,summary,assignee", "--out", str(out)])

    assert rc == 0
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Summary,Team,assignee,Sub-tasks,Sub-task hours"
    assert all(len(line.split(",")) == 5 for line in lines)
    assert lines[1] == "First,Red,,,"
