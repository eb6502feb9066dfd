"""Behaviour proxies layered over services."""

from .base import ProxyConfigurationError, ServiceProxy
from .cache import CacheOptions, CachePolicy, CacheProxy, default_cache_key
from .retry import RetryOptions, RetryPolicy, RetryProxy, exponential_backoff

__all__ = [
    "CacheOptions",
    "CachePolicy",
    "CacheProxy",
    "ProxyConfigurationError",
    "RetryOptions",
    "RetryPolicy",
    "RetryProxy",
    "ServiceProxy",
    "default_cache_key",
    "exponential_backoff",
]
