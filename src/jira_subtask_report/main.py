# src/jira_subtask_report/main.py
from __future__ import annotations

import argparse
import json
import logging
import sys
from contextlib import nullcontext

from .aggregate import collect_issues
from .config import Settings
from .fields import fetch_field_catalog, resolve_columns
from .jira_api import JiraClient
from .logging_setup import setup_logging_from_env
from .report import sort_by_key, write_csv, write_json_lines

log = logging.getLogger(__name__)


def cmd_fields(args: argparse.Namespace) -> int:
    settings = Settings.from_env(args.env_file)
    with JiraClient(settings) as client:
        catalog = fetch_field_catalog(client)
    print(json.dumps(catalog, ensure_ascii=False, indent=2, sort_keys=True))
    return 0


def cmd_report(args: argparse.Namespace) -> int:
    settings = Settings.from_env(args.env_file)
    jql = args.jql or settings.jql
    if not jql:
        log.error("Keine JQL: --jql angeben oder JIRA_JQL setzen")
        return 2

    names = args.fields.split(",") if args.fields else list(settings.fields)

    with JiraClient(settings) as client:
        catalog = fetch_field_catalog(client)
        # doppelte IDs würden Spalten verschieben; resolve_columns entfernt sie
        columns = resolve_columns(catalog, names)
        headers = [name for name, _ in columns]
        field_ids = [field_id for _, field_id in columns]
        issues = sort_by_key(collect_issues(client, jql, field_ids, max_workers=args.workers))
        rest_calls = client.rest_calls

    target = open(args.out, "w", encoding="utf-8", newline="") if args.out else nullcontext(sys.stdout)
    with target as fh:
        if args.format == "json":
            count = write_json_lines(issues, fh, strict_dates=settings.strict_dates)
        else:
            count = write_csv(issues, headers, fh, strict_dates=settings.strict_dates)

    log.info("Report done", extra={"count": count, "rest_calls": rest_calls})
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="jira-subtask-report")
    parser.add_argument("--env-file", help="Pfad zur .env (Standard: cwd bzw. Repo-Root)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_fields = sub.add_parser("fields", help="Aufgelöste Custom Fields (Name -> ID) als JSON ausgeben")
    p_fields.set_defaults(func=cmd_fields)

    p_rep = sub.add_parser("report", help="Issues per JQL inkl. Sub-Tasks laden und ausgeben")
    p_rep.add_argument("--jql", help="z.B. 'project = XYZ AND updated >= -14d'; Standard: JIRA_JQL")
    p_rep.add_argument("--fields", help="Kommagetrennte Feldnamen; Standard: JIRA_FIELDS")
    p_rep.add_argument("--workers", type=int, default=None, help="Parallele Worker; Standard: JIRA_MAX_WORKERS")
    p_rep.add_argument("--format", choices=("csv", "json"), default="csv")
    p_rep.add_argument("--out", help="Zieldatei; Standard: stdout")
    p_rep.set_defaults(func=cmd_report)

    args = parser.parse_args(argv)
    setup_logging_from_env()
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
