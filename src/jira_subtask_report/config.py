# src/jira_subtask_report/config.py
from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple
import httpx
from dotenv import load_dotenv, find_dotenv

FIELD_PATH = "/rest/api/2/field"
SEARCH_PATH = "/rest/api/2/search"
ISSUE_PATH_TEMPLATE = "/rest/api/2/issue/{issue_id}"

# Jira liefert ohne Pagination höchstens eine Seite; mehr holen wir bewusst nicht.
MAX_RESULTS = 1000

DEFAULT_FIELDS: Tuple[str, ...] = (
    "key",
    "summary",
    "issuetype",
    "status",
    "priority",
    "assignee",
    "reporter",
    "created",
)


def _parse_bool(val: Optional[str], default: bool = True) -> bool:
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _parse_list(val: Optional[str]) -> Tuple[str, ...]:
    if not val:
        return ()
    return tuple(part.strip() for part in val.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    base_url: str
    auth_token: str
    auth_scheme: str = "Basic"
    ca_bundle: Optional[str] = None
    timeout_s: float = 30.0
    max_workers: int = 8
    # False: kaputte 'created'-Zeitstempel werden zu "N/A" statt den Lauf abzubrechen
    strict_dates: bool = True
    jql: Optional[str] = None
    fields: Tuple[str, ...] = field(default=DEFAULT_FIELDS)

    @classmethod
    def from_env(cls, env_path: Optional[str | Path] = None) -> "Settings":
        # explizite .env, sonst die nächste ab cwd aufwärts
        dotenv_path = str(env_path) if env_path and Path(env_path).is_file() else find_dotenv(usecwd=True)
        if dotenv_path:
            load_dotenv(dotenv_path, override=False)

        base_url = os.getenv("JIRA_BASE_URL") or os.getenv("BASE_URL")
        auth_token = os.getenv("JIRA_AUTH_TOKEN") or os.getenv("JIRA_TOKEN")
        auth_scheme = os.getenv("JIRA_AUTH_SCHEME") or "Basic"
        ca_bundle = os.getenv("JIRA_CA_BUNDLE") or os.getenv("CA_BUNDLE")
        timeout_s = float(os.getenv("JIRA_TIMEOUT_S") or 30.0)
        max_workers = int(os.getenv("JIRA_MAX_WORKERS") or 8)
        strict_dates = _parse_bool(os.getenv("JIRA_STRICT_DATES"), True)
        jql = os.getenv("JIRA_JQL")  # kann None sein
        fields = _parse_list(os.getenv("JIRA_FIELDS")) or DEFAULT_FIELDS

        missing = []
        if not base_url:
            missing.append("JIRA_BASE_URL")
        if not auth_token:
            missing.append("JIRA_AUTH_TOKEN")
        if missing:
            raise RuntimeError(f"Missing required env var(s): {', '.join(missing)} (.env: {dotenv_path or 'n/a'})")
        if max_workers < 1:
            raise RuntimeError(f"JIRA_MAX_WORKERS must be >= 1, got {max_workers}")

        return cls(
            base_url=base_url.rstrip("/"),
            auth_token=auth_token,
            auth_scheme=auth_scheme,
            ca_bundle=ca_bundle,
            timeout_s=timeout_s,
            max_workers=max_workers,
            strict_dates=strict_dates,
            jql=jql,
            fields=fields,
        )

    def build_client(self, transport: httpx.BaseTransport | None = None) -> httpx.Client:
        # Token ist opak (bei Basic bereits base64-kodiert "user:token")
        headers = {
            "Authorization": f"{self.auth_scheme} {self.auth_token}",
            "Accept": "application/json",
        }
        timeout = httpx.Timeout(self.timeout_s)
        verify = self.ca_bundle if self.ca_bundle else True
        return httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            verify=verify,
            transport=transport,
        )
