"""Terminal client for Jira built around a service container and TTL cache."""

__version__ = "0.1.0"
