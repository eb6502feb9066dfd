"""Command-line entry point for issuedeck."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

from issuedeck.bootstrap import Services, bootstrap
from issuedeck.core import BootstrapParams, ConfigError, load_bootstrap_params
from issuedeck.core.models import Issue, Report
from issuedeck.storage import StorageError
from issuedeck.tracker import TrackerError

METADATA_KINDS = ("projects", "types", "statuses", "users", "labels", "views", "sprints")


def build_parser() -> argparse.ArgumentParser:
    """Create and configure the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Terminal client for Jira")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to a .env file containing ISSUEDECK_* overrides.",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=None,
        help="Logging verbosity (DEBUG, INFO, WARNING, ...).",
    )
    parser.add_argument(
        "--clear-cache",
        dest="clear_cache",
        action="store_true",
        default=None,
        help="Drop every cached entry before running the command.",
    )

    commands = parser.add_subparsers(dest="command")
    commands.add_parser("info", help="Show configured paths.")
    commands.add_parser("cache-clear", help="Invalidate all cached entries.")

    metadata = commands.add_parser("metadata", help="List tracker metadata.")
    metadata.add_argument("kind", choices=METADATA_KINDS)
    metadata.add_argument(
        "--refresh", action="store_true", help="Bypass the cache and refetch."
    )

    issue = commands.add_parser("issue", help="Show a single issue.")
    issue.add_argument("key")

    transitions = commands.add_parser(
        "transitions", help="List workflow transitions available to an issue."
    )
    transitions.add_argument("key")
    transitions.add_argument(
        "--refresh", action="store_true", help="Bypass the cache and refetch."
    )

    search = commands.add_parser("search", help="Run a JQL search or saved report.")
    search.add_argument("jql", help="JQL query, or @name for a saved report.")
    search.add_argument("--limit", type=int, default=50)

    reports = commands.add_parser("reports", help="Manage saved reports.")
    reports.add_argument("--save", nargs=2, metavar=("NAME", "JQL"), default=None)
    reports.add_argument("--delete", metavar="NAME", default=None)
    return parser


def execute(args: argparse.Namespace, params: BootstrapParams) -> None:
    """Execute the requested CLI command."""
    command = args.command or "info"
    services = Services(bootstrap(params))
    services.logger.debug("Running command %s", command)
    if command == "info":
        print(f"Config file: {params.config_file}")
        print(f"Cache file: {params.cache_file} (prefix '{params.cache_prefix}')")
        print(f"State file: {params.state_file}")
    elif command == "cache-clear":
        removed = services.cache.invalidate_all()
        print(f"Removed {removed} cached entr{'y' if removed == 1 else 'ies'}.")
    elif command == "metadata":
        _run_metadata(services, args.kind, refresh=args.refresh)
    elif command == "issue":
        _print_issues([services.repository.get_issue(args.key)])
    elif command == "transitions":
        _run_transitions(services, args.key, refresh=args.refresh)
    elif command == "search":
        _run_search(services, args.jql, limit=args.limit)
    elif command == "reports":
        _run_reports(services, save=args.save, delete=args.delete)


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    params = load_bootstrap_params(
        env_file=args.env_file,
        log_level=args.log_level,
        clear_cache=args.clear_cache,
    )
    try:
        execute(args, params)
    except (ConfigError, StorageError, TrackerError) as exc:
        print(f"{args.command or 'info'} failed: {exc}")
        raise SystemExit(1) from exc


def _run_metadata(services: Services, kind: str, *, refresh: bool) -> None:
    metadata = services.metadata
    if kind == "views":
        for view in metadata.get_views(invalidate=refresh):
            print(f"{str(view.get('id')):>6}  {view.get('name')}")
        return

    fetchers = {
        "projects": metadata.get_projects,
        "types": metadata.get_types,
        "statuses": metadata.get_statuses,
        "users": metadata.get_users,
        "labels": metadata.get_labels,
        "sprints": metadata.get_sprints,
    }
    items = fetchers[kind](invalidate=refresh)
    if not items:
        print(f"No {kind} found.")
        return
    for item in items:
        print(_describe(item))


def _describe(item: object) -> str:
    key = getattr(item, "key", None)
    name = getattr(item, "display_name", None) or getattr(item, "name", None)
    identifier = key or getattr(item, "id", None) or getattr(item, "account", "")
    if not identifier:
        return str(name or "")
    return f"{str(identifier):>10}  {name or ''}".rstrip()


def _run_transitions(services: Services, key: str, *, refresh: bool) -> None:
    transitions = services.metadata.get_transitions(key, invalidate=refresh)
    if not transitions:
        print(f"No transitions available for {key}.")
        return
    for transition in transitions:
        target = (transition.get("to") or {}).get("name", "")
        print(f"{str(transition.get('id')):>6}  {transition.get('name')} -> {target}")


def _run_search(services: Services, query: str, *, limit: int) -> None:
    if query.startswith("@"):
        report = services.reports.get(query[1:])
        if report is None:
            print(f"No saved report named '{query[1:]}'.")
            return
        query = report.jql
    _print_issues(services.repository.search(query, max_results=limit))


def _run_reports(
    services: Services, *, save: list[str] | None, delete: str | None
) -> None:
    reports = services.reports
    if save is not None:
        name, jql = save
        reports.save(Report(name=name, jql=jql))
        print(f"Saved report '{name}'.")
    if delete is not None:
        if reports.delete(delete):
            print(f"Deleted report '{delete}'.")
        else:
            print(f"No saved report named '{delete}'.")

    saved = reports.list_reports()
    if not saved:
        print("No saved reports.")
        return
    for report in saved:
        print(f"{report.name:<20}  {report.jql}")


def _print_issues(issues: Sequence[Issue]) -> None:
    if not issues:
        print("No issues found.")
        return
    header = f"{'Key':<12}  {'Status':<14}  {'Assignee':<20}  Summary"
    print(header)
    print("-" * len(header))
    for issue in issues:
        print(
            f"{issue.key:<12}  {issue.status or '-':<14}  "
            f"{issue.assignee or '-':<20}  {issue.summary}"
        )


if __name__ == "__main__":
    main()
