"""Service registrations for the application container."""

from __future__ import annotations

import logging
from typing import Any

from .core.config import BootstrapParams, Config
from .core.container import ServiceContainer
from .core.logging import get_logger
from .core.models import Issue
from .proxy import (
    CacheOptions,
    CachePolicy,
    CacheProxy,
    RetryOptions,
    RetryPolicy,
    RetryProxy,
    exponential_backoff,
)
from .storage import Cache, DiskStorage
from .tracker import (
    IssueRepository,
    JiraClient,
    JiraMetadata,
    SavedReports,
    TransientTrackerError,
)


def build_core(container: ServiceContainer, params: BootstrapParams) -> ServiceContainer:
    """Register logging, configuration, storage, cache and proxy services."""
    container.register_service(
        "logger",
        lambda: get_logger(params.log_level, structured=params.log_structured),
    )
    container.register_service("config", lambda: Config(params.config_file).initialize())
    container.register_service("storage", lambda: DiskStorage(params.state_file))
    container.register_service("cache.storage", lambda: DiskStorage(params.cache_file))

    def make_cache(storage: DiskStorage) -> Cache:
        cache = Cache(storage, params.cache_prefix)
        if params.clear_cache:
            cache.invalidate_all()
        return cache

    container.register_service("cache", make_cache, ["cache.storage"])
    container.register_service("proxy.retry", RetryProxy)
    container.register_service("proxy.cache", CacheProxy, ["cache"])

    container.register_behaviour(
        "cachable",
        lambda service, opts, cache_proxy: cache_proxy.create_proxy(service, opts),
        ["proxy.cache"],
    )
    container.register_behaviour(
        "retryable",
        lambda service, opts, retry_proxy: retry_proxy.create_proxy(service, opts),
        ["proxy.retry"],
    )
    return container


def build_tracker(container: ServiceContainer, params: BootstrapParams) -> ServiceContainer:
    """Register the Jira client, metadata, issue repository and saved reports.

    The client retries transient failures; the repository caches lookups on
    top of it, so a cache miss triggers a retried fetch.
    """
    retry_options = RetryOptions(
        methods=("get",),
        policy=RetryPolicy(
            max_attempts=params.retry_attempts,
            backoff=exponential_backoff(params.retry_attempts),
            retry_on=(TransientTrackerError,),
        ),
    )
    cache_options = CacheOptions(
        methods={
            "get_issue": CachePolicy(ttl=params.cache_ttl, codec=Issue),
            "search": CachePolicy(ttl=params.cache_ttl, codec=Issue),
        }
    )

    container.register_service(
        "tracker.client",
        lambda config, logger: container.create_proxy(
            "retryable", JiraClient(config.settings, logger), retry_options
        ),
        ["config", "logger"],
    )
    container.register_service(
        "tracker.metadata",
        lambda client, cache: JiraMetadata(client, cache),
        ["tracker.client", "cache"],
    )
    container.register_service(
        "tracker.repository",
        lambda client, logger: container.create_proxy(
            "cachable", IssueRepository(client, logger), cache_options
        ),
        ["tracker.client", "logger"],
    )
    container.register_service("tracker.reports", SavedReports, ["storage"])
    container.register_service("tracker", lambda repository: repository, ["tracker.repository"])
    return container


def bootstrap(params: BootstrapParams) -> ServiceContainer:
    """Return a fresh container with every application service registered."""
    container = ServiceContainer()
    build_core(container, params)
    build_tracker(container, params)
    return container


class Services:
    """Typed accessors over the names registered by :func:`bootstrap`."""

    def __init__(self, container: ServiceContainer) -> None:
        self._container = container

    def _get(self, name: str) -> Any:
        return self._container.resolve(name)

    @property
    def logger(self) -> logging.Logger:
        return self._get("logger")

    @property
    def config(self) -> Config:
        return self._get("config")

    @property
    def storage(self) -> DiskStorage:
        return self._get("storage")

    @property
    def cache(self) -> Cache:
        return self._get("cache")

    @property
    def metadata(self) -> JiraMetadata:
        return self._get("tracker.metadata")

    @property
    def repository(self) -> IssueRepository:
        return self._get("tracker.repository")

    @property
    def reports(self) -> SavedReports:
        return self._get("tracker.reports")


__all__ = ["Services", "bootstrap", "build_core", "build_tracker"]
