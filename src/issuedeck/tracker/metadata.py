"""Cached tracker metadata for Jira."""

from __future__ import annotations

import logging
from typing import Any

from ..core.interfaces import TrackerClient
from ..core.models import IssueType, Label, Project, Sprint, Status, User
from ..storage.cache import MISSING, Cache
from .client import TrackerError

LOGGER = logging.getLogger(__name__)

METADATA_TTL = 86400


def _unique(items: list[Any], key: Any) -> list[Any]:
    seen: set[Any] = set()
    unique: list[Any] = []
    for item in items:
        marker = key(item)
        if marker in seen:
            continue
        seen.add(marker)
        unique.append(item)
    return unique


class JiraMetadata:
    """Metadata for Jira.

    Everything is fetched lazily and cached for a day. Pass ``invalidate=True``
    to bypass the cache and refresh the stored copy.
    """

    def __init__(self, client: TrackerClient, cache: Cache, ttl: float = METADATA_TTL) -> None:
        self._client = client
        self._cache = cache
        self._ttl = ttl

    def get_projects(self, invalidate: bool = False) -> list[Project]:
        """Return all projects visible to the configured account."""

        def fetch() -> list[Project]:
            response = self._client.get("/rest/api/2/project")
            return [
                Project(id=str(item["id"]), key=item["key"], name=item["name"])
                for item in response
            ]

        return self._cache.memoize(
            "projects", self._ttl, fetch, invalidate=invalidate, codec=Project
        )

    def get_types(self, invalidate: bool = False) -> list[IssueType]:
        """Return the issue types used across all projects."""
        cached = self._cache.get("types", invalidate)
        if cached is not MISSING:
            return [IssueType.unserialize(item) for item in cached]

        response = self._client.get("/rest/api/2/issue/createmeta")
        types = [
            IssueType(id=str(item["id"]), name=item["name"])
            for project in response.get("projects", [])
            for item in project.get("issuetypes", [])
        ]
        types = _unique(types, lambda item: item.id)
        return self._cache.set_serialized_thenable("types", self._ttl)(types)

    def get_statuses(self, invalidate: bool = False) -> list[Status]:
        """Return the workflow statuses."""

        def fetch() -> list[Status]:
            response = self._client.get("/rest/api/2/status")
            statuses = [Status(id=str(item["id"]), name=item["name"]) for item in response]
            return _unique(statuses, lambda item: item.id)

        return self._cache.memoize(
            "statuses", self._ttl, fetch, invalidate=invalidate, codec=Status
        )

    def get_users(self, invalidate: bool = False) -> list[User]:
        """Return users assignable in any project, without add-on accounts."""
        cached = self._cache.get("users", invalidate)
        if cached is not MISSING:
            return [User.unserialize(item) for item in cached]

        users: list[User] = []
        for project in self.get_projects():
            response = self._client.get(
                "/rest/api/2/user/assignable/search", params={"project": project.key}
            )
            users.extend(
                User(
                    account=item.get("name") or item["accountId"],
                    display_name=item.get("displayName"),
                )
                for item in response
            )
        users = [
            user
            for user in _unique(users, lambda item: item.account)
            if not user.account.startswith("addon_")
        ]
        LOGGER.debug("Fetched %d assignable user(s)", len(users))
        return self._cache.set_serialized_thenable("users", self._ttl)(users)

    def get_labels(self, invalidate: bool = False) -> list[Label]:
        """Return the labels Jira suggests for an empty query."""

        def fetch() -> list[Label]:
            response = self._client.get(
                "/rest/api/1.0/labels/suggest", params={"query": ""}
            )
            labels = [Label(name=item["label"]) for item in response.get("suggestions", [])]
            return _unique(labels, lambda item: item.name)

        return self._cache.memoize(
            "labels", self._ttl, fetch, invalidate=invalidate, codec=Label
        )

    def get_views(self, invalidate: bool = False) -> list[dict[str, Any]]:
        """Return the agile boards as raw payloads."""

        def fetch() -> list[dict[str, Any]]:
            response = self._client.get("/rest/greenhopper/1.0/rapidview")
            return response.get("views", [])

        return self._cache.memoize("views", self._ttl, fetch, invalidate=invalidate)

    def get_sprints(self, invalidate: bool = False) -> list[Sprint]:
        """Return the sprints of every board."""

        def fetch() -> list[Sprint]:
            sprints: list[Sprint] = []
            for view in self.get_views():
                response = self._client.get(
                    "/rest/greenhopper/1.0/xboard/plan/backlog/data.json",
                    params={"rapidViewId": view["id"]},
                )
                sprints.extend(
                    Sprint(id=int(item["id"]), name=item["name"])
                    for item in response.get("sprints", [])
                )
            return sprints

        return self._cache.memoize(
            "sprints", self._ttl, fetch, invalidate=invalidate, codec=Sprint
        )

    def get_transitions(self, num: str, invalidate: bool = False) -> list[dict[str, Any]]:
        """Return the raw workflow transitions available to issue ``num``.

        Each issue is cached under its own ``transitions:<num>`` key, with
        the transition fields expanded.
        """
        key = f"transitions:{num}"
        cached = self._cache.get(key, invalidate)
        if cached is not MISSING:
            return cached

        response = self._client.get(
            f"/rest/api/2/issue/{num}/transitions",
            params={"expand": "transitions.fields"},
        )
        return self._cache.set_thenable(key, self._ttl)(response.get("transitions", []))

    def get_issue_transition(self, num: str, status: str) -> dict[str, Any]:
        """Return the transition moving issue ``num`` into ``status``.

        Status names compare case-insensitively. Raises :class:`TrackerError`
        when the workflow offers no such transition.
        """
        wanted = status.lower()
        for transition in self.get_transitions(num):
            target = transition.get("to") or {}
            if str(target.get("name", "")).lower() == wanted:
                return transition
        raise TrackerError(f"Could not find transition for {status}")


__all__ = ["JiraMetadata", "METADATA_TTL"]
