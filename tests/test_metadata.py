"""Tests for cached Jira metadata."""

from __future__ import annotations

from typing import Any

import pytest

from issuedeck.core.models import IssueType, Label, Project, Sprint, User
from issuedeck.storage import Cache, MemoryStorage
from issuedeck.tracker import JiraMetadata, TrackerError

RESPONSES: dict[str, Any] = {
    "/rest/api/2/project": [
        {"id": 1, "key": "ABC", "name": "Alphabet"},
        {"id": 2, "key": "XYZ", "name": "Zulu"},
    ],
    "/rest/api/2/issue/createmeta": {
        "projects": [
            {"issuetypes": [{"id": "1", "name": "Bug"}, {"id": "2", "name": "Story"}]},
            {"issuetypes": [{"id": "1", "name": "Bug"}]},
        ]
    },
    "/rest/api/2/status": [{"id": "1", "name": "Open"}, {"id": "1", "name": "Open"}],
    "/rest/greenhopper/1.0/rapidview": {"views": [{"id": 5, "name": "Board"}]},
    "/rest/greenhopper/1.0/xboard/plan/backlog/data.json": {
        "sprints": [{"id": 9, "name": "Sprint 9"}]
    },
    "/rest/api/1.0/labels/suggest": {
        "suggestions": [{"label": "backend"}, {"label": "ui"}, {"label": "backend"}]
    },
    "/rest/api/2/issue/ABC-1/transitions": {
        "transitions": [
            {"id": "11", "name": "Start", "to": {"name": "In Progress"}},
            {"id": "21", "name": "Finish", "to": {"name": "Done"}},
        ]
    },
    "/rest/api/2/issue/ABC-2/transitions": {"transitions": []},
}

USERS = {
    "ABC": [
        {"name": "jdoe", "displayName": "Jane Doe"},
        {"name": "addon_bot", "displayName": "Bot"},
    ],
    "XYZ": [{"name": "jdoe", "displayName": "Jane Doe"}, {"name": "rroe"}],
}


class StubClient:
    """Client stub answering from canned responses and recording calls."""

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.calls: list[tuple[str, dict[str, Any] | None]] = []
        self.responses = RESPONSES if responses is None else responses

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        self.calls.append((path, params))
        if path == "/rest/api/2/user/assignable/search":
            assert params is not None
            return USERS[params["project"]]
        return self.responses[path]


def _metadata() -> tuple[JiraMetadata, StubClient, Cache]:
    client = StubClient()
    cache = Cache(MemoryStorage(), "jira", clock=lambda: 0.0)
    return JiraMetadata(client, cache), client, cache


def test_types_deduplicated_and_cached() -> None:
    metadata, client, cache = _metadata()

    first = metadata.get_types()
    second = metadata.get_types()

    assert first == [IssueType(id="1", name="Bug"), IssueType(id="2", name="Story")]
    assert second == first
    assert len(client.calls) == 1
    assert cache.get("types") == [{"id": "1", "name": "Bug"}, {"id": "2", "name": "Story"}]


def test_invalidate_refetches() -> None:
    metadata, client, _ = _metadata()

    metadata.get_projects()
    projects = metadata.get_projects(invalidate=True)

    assert projects[0] == Project(id="1", key="ABC", name="Alphabet")
    assert len(client.calls) == 2


def test_users_unique_without_addons() -> None:
    metadata, client, _ = _metadata()

    users = metadata.get_users()

    assert users == [User(account="jdoe", display_name="Jane Doe"), User(account="rroe")]
    assert [path for path, _ in client.calls].count("/rest/api/2/project") == 1


def test_sprints_collected_per_view() -> None:
    metadata, client, _ = _metadata()

    assert metadata.get_sprints() == [Sprint(id=9, name="Sprint 9")]
    assert metadata.get_views() == [{"id": 5, "name": "Board"}]
    assert (
        "/rest/greenhopper/1.0/xboard/plan/backlog/data.json",
        {"rapidViewId": 5},
    ) in client.calls
    assert len(client.calls) == 2


def test_statuses_deduplicated() -> None:
    metadata, _, _ = _metadata()

    assert [status.name for status in metadata.get_statuses()] == ["Open"]


def test_empty_results_are_cached() -> None:
    """An empty list is a valid cached answer and must not trigger refetches."""

    client = StubClient(
        {
            "/rest/api/2/issue/createmeta": {"projects": []},
            "/rest/api/2/project": [],
            "/rest/greenhopper/1.0/rapidview": {"views": []},
        }
    )
    metadata = JiraMetadata(client, Cache(MemoryStorage(), "jira", clock=lambda: 0.0))

    for _ in range(2):
        assert metadata.get_types() == []
        assert metadata.get_users() == []
        assert metadata.get_views() == []

    paths = [path for path, _ in client.calls]
    assert paths.count("/rest/api/2/issue/createmeta") == 1
    assert paths.count("/rest/api/2/project") == 1
    assert paths.count("/rest/greenhopper/1.0/rapidview") == 1


def test_labels_unique_and_cached() -> None:
    metadata, client, cache = _metadata()

    assert metadata.get_labels() == [Label(name="backend"), Label(name="ui")]
    assert metadata.get_labels() == [Label(name="backend"), Label(name="ui")]
    assert client.calls == [("/rest/api/1.0/labels/suggest", {"query": ""})]
    assert cache.get("labels") == ["backend", "ui"]


def test_transitions_cached_per_issue() -> None:
    metadata, client, cache = _metadata()

    first = metadata.get_transitions("ABC-1")
    metadata.get_transitions("ABC-1")
    metadata.get_transitions("ABC-2")
    metadata.get_transitions("ABC-2")

    assert [item["id"] for item in first] == ["11", "21"]
    assert client.calls == [
        ("/rest/api/2/issue/ABC-1/transitions", {"expand": "transitions.fields"}),
        ("/rest/api/2/issue/ABC-2/transitions", {"expand": "transitions.fields"}),
    ]
    assert cache.get("transitions:ABC-2") == []


def test_issue_transition_matches_target_status() -> None:
    metadata, _, _ = _metadata()

    assert metadata.get_issue_transition("ABC-1", "done")["id"] == "21"
    assert metadata.get_issue_transition("ABC-1", "IN PROGRESS")["id"] == "11"
    with pytest.raises(TrackerError, match="Closed"):
        metadata.get_issue_transition("ABC-1", "Closed")
