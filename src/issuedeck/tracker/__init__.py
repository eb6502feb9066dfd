"""Issue tracker integration."""

from .client import JiraClient, TrackerError, TransientTrackerError
from .metadata import JiraMetadata
from .reports import SavedReports
from .repository import IssueRepository

__all__ = [
    "IssueRepository",
    "JiraClient",
    "JiraMetadata",
    "SavedReports",
    "TrackerError",
    "TransientTrackerError",
]
