"""Behaviour re-invoking failed method calls under a bounded policy."""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
import time
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from .base import ProxyConfigurationError, ServiceProxy, resolve_methods

LOGGER = logging.getLogger(__name__)


def exponential_backoff(
    attempts: int, *, base: float = 1.0, cap: float = 8.0
) -> tuple[float, ...]:
    """Return doubling waits between ``attempts`` tries, capped at ``cap``."""
    return tuple(min(base * 2**step, cap) for step in range(max(attempts - 1, 0)))


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Attempt budget and the waits between attempts.

    ``backoff[n]`` is the wait after the ``n+1``-th failure; the last entry is
    reused when the schedule is shorter than the budget.
    """

    max_attempts: int = 3
    backoff: Sequence[float] = (1.0, 2.0, 4.0)
    retry_on: tuple[type[BaseException], ...] = (Exception,)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ProxyConfigurationError("max_attempts must be at least 1")
        backoff = tuple(float(delay) for delay in self.backoff)
        if any(delay < 0 for delay in backoff):
            raise ProxyConfigurationError("Backoff delays must not be negative")
        object.__setattr__(self, "backoff", backoff)

    def delay(self, failures: int) -> float:
        """Return the wait after ``failures`` consecutive failures."""
        if not self.backoff:
            return 0.0
        return self.backoff[min(failures, len(self.backoff)) - 1]


@dataclass(frozen=True, slots=True)
class RetryOptions:
    """Methods intercepted by a retry proxy and the policy they share."""

    methods: tuple[str, ...]
    policy: RetryPolicy = field(default_factory=RetryPolicy)


def _coerce_options(options: Any) -> RetryOptions:
    if isinstance(options, RetryOptions):
        return options
    if isinstance(options, Iterable) and not isinstance(options, (str, bytes)):
        return RetryOptions(methods=tuple(options))
    msg = f"Retry proxy options must be RetryOptions or method names, got {options!r}"
    raise ProxyConfigurationError(msg)


class RetryProxy:
    """Builds proxies whose intercepted methods retry on failure.

    Retrying is only safe for idempotent operations; callers mark read-like
    methods only. When the budget is spent the last exception is re-raised
    as is.
    """

    def __init__(
        self,
        sleep: Callable[[float], None] = time.sleep,
        async_sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._sleep = sleep
        self._async_sleep = async_sleep

    def create_proxy(self, target: Any, options: Any) -> ServiceProxy:
        """Wrap ``target`` so the methods named in ``options`` are retried."""
        opts = _coerce_options(options)
        methods = resolve_methods(target, opts.methods)
        wrappers = {
            name: self._wrap(name, method, opts.policy)
            for name, method in methods.items()
        }
        return ServiceProxy(target, wrappers)

    @staticmethod
    def _log_failure(
        name: str, attempt: int, policy: RetryPolicy, exc: BaseException, delay: float
    ) -> None:
        LOGGER.warning(
            "%s failed on attempt %d/%d (%s); retrying in %.1fs",
            name,
            attempt,
            policy.max_attempts,
            exc,
            delay,
        )

    def _wrap(
        self, name: str, method: Callable[..., Any], policy: RetryPolicy
    ) -> Callable[..., Any]:
        if inspect.iscoroutinefunction(method):

            @functools.wraps(method)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                attempt = 1
                while True:
                    try:
                        return await method(*args, **kwargs)
                    except policy.retry_on as exc:
                        if attempt >= policy.max_attempts:
                            raise
                        delay = policy.delay(attempt)
                        self._log_failure(name, attempt, policy, exc, delay)
                        if delay > 0:
                            await self._async_sleep(delay)
                        attempt += 1

            return async_wrapper

        @functools.wraps(method)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 1
            while True:
                try:
                    return method(*args, **kwargs)
                except policy.retry_on as exc:
                    if attempt >= policy.max_attempts:
                        raise
                    delay = policy.delay(attempt)
                    self._log_failure(name, attempt, policy, exc, delay)
                    if delay > 0:
                        self._sleep(delay)
                    attempt += 1

        return wrapper


__all__ = ["RetryOptions", "RetryPolicy", "RetryProxy", "exponential_backoff"]
