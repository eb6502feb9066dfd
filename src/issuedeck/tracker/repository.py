"""Issue lookups against the tracker."""

from __future__ import annotations

import logging
from typing import Any

from ..core.interfaces import IssueSource, TrackerClient
from ..core.models import Issue

LOGGER = logging.getLogger(__name__)

ISSUE_FIELDS = "summary,status,issuetype,assignee,labels"


def _name(value: Any, *fields: str) -> str | None:
    if not isinstance(value, dict):
        return None
    for field_name in fields:
        if value.get(field_name):
            return str(value[field_name])
    return None


def issue_from_payload(payload: dict[str, Any]) -> Issue:
    """Build an :class:`Issue` from a REST issue payload."""
    fields = payload.get("fields") or {}
    return Issue(
        key=payload["key"],
        summary=fields.get("summary") or "",
        status=_name(fields.get("status"), "name"),
        issue_type=_name(fields.get("issuetype"), "name"),
        assignee=_name(fields.get("assignee"), "displayName", "name"),
        labels=tuple(fields.get("labels") or ()),
    )


class IssueRepository(IssueSource):
    """Fetch issues by key or JQL."""

    def __init__(self, client: TrackerClient, logger: logging.Logger | None = None) -> None:
        self._client = client
        self._logger = logger or LOGGER

    def get_issue(self, key: str) -> Issue:
        """Return a single issue by key."""
        payload = self._client.get(
            f"/rest/api/2/issue/{key}", params={"fields": ISSUE_FIELDS}
        )
        return issue_from_payload(payload)

    def search(self, jql: str, max_results: int = 50) -> list[Issue]:
        """Return issues matching ``jql``."""
        payload = self._client.get(
            "/rest/api/2/search",
            params={"jql": jql, "maxResults": max_results, "fields": ISSUE_FIELDS},
        )
        issues = [issue_from_payload(item) for item in payload.get("issues", [])]
        self._logger.debug("Search %r matched %d issue(s)", jql, len(issues))
        return issues


__all__ = ["IssueRepository", "issue_from_payload"]
