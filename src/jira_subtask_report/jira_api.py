from __future__ import annotations
import json
import logging
import threading
from typing import Any, Iterator, Mapping, Sequence

import httpx

from .config import FIELD_PATH, ISSUE_PATH_TEMPLATE, MAX_RESULTS, SEARCH_PATH, Settings
from .errors import MalformedResponseError, TransportError
from .parse import Issue
from .shapes import expect_list, expect_object, require

log = logging.getLogger(__name__)


class CallCounter:
    """Thread-safe counter for issue fetches shared by all worker threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


class JiraClient:
    def __init__(self, settings: Settings, client: httpx.Client | None = None) -> None:
        self.settings = settings
        self._owns_client = client is None
        self.client = client or settings.build_client()
        self.calls = CallCounter()

    # lifecycle
    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "JiraClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def rest_calls(self) -> int:
        return self.calls.value

    # transport
    def get_raw(self, path: str, params: Mapping[str, str] | None = None) -> bytes:
        """Ein GET, Body als Bytes; jeder Fehler ist hart (kein Retry)."""
        try:
            r = self.client.get(path, params=params)
        except httpx.HTTPError as e:
            raise TransportError(f"GET {path} failed: {e}") from e
        if not r.is_success:
            raise TransportError(
                f"Jira {path} returned {r.status_code}. Body: {r.text}",
                status_code=r.status_code,
            )
        return r.content

    def get_json(self, path: str, params: Mapping[str, str] | None = None) -> Any:
        body = self.get_raw(path, params)
        try:
            return json.loads(body)
        except ValueError as e:
            raise MalformedResponseError(f"Jira {path} returned invalid JSON: {e}") from e

    # API
    def get_fields(self) -> list:
        return expect_list(self.get_json(FIELD_PATH), "fields")

    def get_issue(self, issue_id: str, include_changelog: bool = False) -> dict:
        path = ISSUE_PATH_TEMPLATE.format(issue_id=issue_id)
        params = {"expand": "changelog"} if include_changelog else None
        self.calls.increment()
        log.debug("Fetching issue", extra={"issue_id": issue_id, "changelog": include_changelog})
        return expect_object(self.get_json(path, params), f"issue {issue_id}")

    def search_issues(self, jql: str, fields: Sequence[str]) -> Iterator[Issue]:
        """
        Ein einzelner Aufruf von /rest/api/2/search (maxResults fest, keine
        Pagination). Liefert Issues in der Reihenfolge der Antwort.
        """
        requested = tuple(fields)
        params = {
            "jql": jql,
            "fields": ",".join(requested),
            "maxResults": str(MAX_RESULTS),
        }
        data = expect_object(self.get_json(SEARCH_PATH, params), "search")
        issues = expect_list(require(data, "issues", "search"), "search.issues")

        total = data.get("total")
        if isinstance(total, int) and total > len(issues):
            log.warning(
                "Search truncated to a single page",
                extra={"returned": len(issues), "total": total, "max_results": MAX_RESULTS},
            )
        log.info("Search done", extra={"jql": jql, "count": len(issues)})

        for idx, raw in enumerate(issues):
            yield Issue(data=expect_object(raw, f"search.issues[{idx}]"), fields=requested)


__all__ = [
    "CallCounter",
    "JiraClient",
    "FIELD_PATH",
    "SEARCH_PATH",
]
