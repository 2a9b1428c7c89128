# tests/test_config.py
import pytest

from jira_subtask_report.config import DEFAULT_FIELDS, Settings

ENV_VARS = [
    "JIRA_BASE_URL", "BASE_URL", "JIRA_AUTH_TOKEN", "JIRA_TOKEN", "JIRA_AUTH_SCHEME",
    "JIRA_CA_BUNDLE", "CA_BUNDLE", "JIRA_TIMEOUT_S", "JIRA_MAX_RESULTS", "JIRA_MAX_WORKERS",
    "JIRA_STRICT_DATES", "JIRA_JQL", "JIRA_FIELDS",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # setenv merkt sich den Originalzustand, damit load_dotenv nichts in andere Tests leakt
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_from_env_file(clean_env):
    env = clean_env / "test.env"
    env.write_text(
        "JIRA_BASE_URL=https://jira.example.com/\n"
        "JIRA_AUTH_TOKEN=abc==\n"
        "JIRA_MAX_WORKERS=4\n"
        "JIRA_STRICT_DATES=false\n"
        "JIRA_FIELDS=Summary, Story Points ,assignee\n",
        encoding="utf-8",
    )
    s = Settings.from_env(env)
    assert s.base_url == "https://jira.example.com"
    assert s.auth_token == "abc=="
    assert s.auth_scheme == "Basic"
    assert s.max_workers == 4
    assert s.strict_dates is False
    assert s.fields == ("Summary", "Story Points", "assignee")


def test_defaults(clean_env, monkeypatch):
    monkeypatch.setattr("jira_subtask_report.config.load_dotenv", lambda *a, **kw: False)
    monkeypatch.setenv("JIRA_BASE_URL", "https://jira.example.com")
    monkeypatch.setenv("JIRA_TOKEN", "t")
    s = Settings.from_env(clean_env / "missing.env")
    assert s.fields == DEFAULT_FIELDS
    assert s.strict_dates is True
    assert s.jql is None


def test_missing_required(clean_env, monkeypatch):
    monkeypatch.setattr("jira_subtask_report.config.find_dotenv", lambda usecwd=True: "")
    monkeypatch.setattr("jira_subtask_report.config.load_dotenv", lambda *a, **kw: False)
    with pytest.raises(RuntimeError, match="JIRA_BASE_URL"):
        Settings.from_env(clean_env / "missing.env")
