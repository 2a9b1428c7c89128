# src/jira_subtask_report/aggregate.py
from __future__ import annotations

import dataclasses
import logging
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from typing import Iterator, List, Sequence

from .extract import extract_field
from .jira_api import JiraClient
from .parse import Issue, SubTask, developer_of_record, is_bug
from .shapes import expect_list, expect_object, expect_str, require

log = logging.getLogger(__name__)


def fetch_sub_tasks(client: JiraClient, parent: dict, *, strict_dates: bool = True) -> List[SubTask]:
    """Holt jeden Sub-Task des Parents einzeln, in der Reihenfolge des Parents."""
    fields = expect_object(require(parent, "fields", "issue"), "issue.fields")
    refs = expect_list(require(fields, "subtasks", "issue.fields"), "issue.fields.subtasks")

    result: List[SubTask] = []
    for idx, ref in enumerate(refs):
        where = f"issue.fields.subtasks[{idx}]"
        sub_id = expect_str(require(expect_object(ref, where), "id", where), f"{where}.id")
        sub = client.get_issue(sub_id, include_changelog=False)
        result.append(
            SubTask(
                type=extract_field(sub, "issuetype", strict_dates=strict_dates),
                name=extract_field(sub, "summary", strict_dates=strict_dates),
                assignee_name=extract_field(sub, "assignee", strict_dates=strict_dates),
                total_hours=extract_field(sub, "timetracking", strict_dates=strict_dates),
            )
        )
    return result


def aggregate_issue(client: JiraClient, issue: Issue) -> Issue:
    """
    Populate sub-tasks for one search hit. For bug-type parents the assignee
    is replaced by the developer who moved it to "In Development".
    """
    strict = client.settings.strict_dates
    issue_id = expect_str(require(issue.data, "id", "issue"), "issue.id")
    parent = client.get_issue(issue_id, include_changelog=True)

    sub_tasks = fetch_sub_tasks(client, parent, strict_dates=strict)
    populated = dataclasses.replace(issue, sub_tasks=tuple(sub_tasks))

    if is_bug(extract_field(parent, "issuetype", strict_dates=strict)):
        populated = dataclasses.replace(populated, assignee_name=developer_of_record(parent))

    log.debug("Issue aggregated", extra={"issue": issue.key, "sub_tasks": len(sub_tasks)})
    return populated


def collect_issues(
    client: JiraClient,
    jql: str,
    fields: Sequence[str],
    *,
    max_workers: int | None = None,
) -> Iterator[Issue]:
    """
    Search, then aggregate every hit on a bounded thread pool.

    Ergebnisse kommen in Fertigstellungs-Reihenfolge, nicht in Suchreihenfolge.
    Der erste Fehler bricht den ganzen Lauf ab; offene Aufgaben werden verworfen.
    """
    workers = max_workers or client.settings.max_workers
    pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="aggregate")
    try:
        pending = {pool.submit(aggregate_issue, client, issue) for issue in client.search_issues(jql, fields)}
        log.info("Aggregating issues", extra={"count": len(pending), "workers": workers})
        while pending:
            done, pending = wait(pending, return_when=FIRST_COMPLETED)
            for fut in done:
                yield fut.result()
    except BaseException:
        pool.shutdown(wait=False, cancel_futures=True)
        raise
    pool.shutdown(wait=True)
    log.info("Aggregation complete", extra={"rest_calls": client.rest_calls})
