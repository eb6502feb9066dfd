"""Round-trip tests for serializable domain models."""

from __future__ import annotations

import json

import pytest

from issuedeck.core.interfaces import Serializable
from issuedeck.core.models import (
    Issue,
    IssueType,
    Label,
    Project,
    Report,
    Sprint,
    Status,
    User,
)

SAMPLES = [
    Project(id="10000", key="ABC", name="Alphabet"),
    IssueType(id="1", name="Bug"),
    Status(id="3", name="In Progress"),
    User(account="jdoe", display_name="Jane Doe"),
    User(account="bot"),
    Sprint(id=7, name="Sprint 7"),
    Label(name="backend"),
    Issue(
        key="ABC-1",
        summary="Crash on start",
        status="Open",
        issue_type="Bug",
        assignee=None,
        labels=("backend", "urgent"),
    ),
    Report(name="mine", jql="assignee = currentUser()"),
]


@pytest.mark.parametrize("item", SAMPLES, ids=lambda item: type(item).__name__)
def test_round_trip_through_json(item: Serializable) -> None:
    payload = json.loads(json.dumps(item.serialize()))

    assert type(item).unserialize(payload) == item


def test_models_satisfy_serializable_protocol() -> None:
    assert all(isinstance(item, Serializable) for item in SAMPLES)
