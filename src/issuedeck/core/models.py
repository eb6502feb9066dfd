"""Core domain models used across the application.

Every model exposes a ``serialize``/``unserialize`` pair so it can be stored
in the JSON-only cache and state files.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Project:
    """Tracker project."""

    id: str
    key: str
    name: str

    def serialize(self) -> dict[str, Any]:
        return {"id": self.id, "key": self.key, "name": self.name}

    @classmethod
    def unserialize(cls, data: dict[str, Any]) -> Project:
        return cls(id=str(data["id"]), key=data["key"], name=data["name"])


@dataclass(frozen=True, slots=True)
class IssueType:
    """Issue type such as Bug or Story."""

    id: str
    name: str

    def serialize(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def unserialize(cls, data: dict[str, Any]) -> IssueType:
        return cls(id=str(data["id"]), name=data["name"])


@dataclass(frozen=True, slots=True)
class Status:
    """Workflow status."""

    id: str
    name: str

    def serialize(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def unserialize(cls, data: dict[str, Any]) -> Status:
        return cls(id=str(data["id"]), name=data["name"])


@dataclass(frozen=True, slots=True)
class User:
    """Assignable user account."""

    account: str
    display_name: str | None = None

    def serialize(self) -> dict[str, Any]:
        return {"account": self.account, "displayName": self.display_name}

    @classmethod
    def unserialize(cls, data: dict[str, Any]) -> User:
        return cls(account=data["account"], display_name=data.get("displayName"))


@dataclass(frozen=True, slots=True)
class Sprint:
    """Agile sprint."""

    id: int
    name: str

    def serialize(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def unserialize(cls, data: dict[str, Any]) -> Sprint:
        return cls(id=int(data["id"]), name=data["name"])


@dataclass(frozen=True, slots=True)
class Label:
    """Free-form issue label."""

    name: str

    def serialize(self) -> str:
        return self.name

    @classmethod
    def unserialize(cls, data: str) -> Label:
        return cls(name=data)


@dataclass(frozen=True, slots=True)
class Issue:
    """Normalized issue summary."""

    key: str
    summary: str
    status: str | None
    issue_type: str | None
    assignee: str | None
    labels: tuple[str, ...] = ()

    def serialize(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "summary": self.summary,
            "status": self.status,
            "type": self.issue_type,
            "assignee": self.assignee,
            "labels": list(self.labels),
        }

    @classmethod
    def unserialize(cls, data: dict[str, Any]) -> Issue:
        return cls(
            key=data["key"],
            summary=data["summary"],
            status=data.get("status"),
            issue_type=data.get("type"),
            assignee=data.get("assignee"),
            labels=tuple(data.get("labels") or ()),
        )


@dataclass(frozen=True, slots=True)
class Report:
    """Named saved search."""

    name: str
    jql: str

    def serialize(self) -> dict[str, Any]:
        return {"name": self.name, "jql": self.jql}

    @classmethod
    def unserialize(cls, data: dict[str, Any]) -> Report:
        return cls(name=data["name"], jql=data["jql"])


__all__ = [
    "Issue",
    "IssueType",
    "Label",
    "Project",
    "Report",
    "Sprint",
    "Status",
    "User",
]
