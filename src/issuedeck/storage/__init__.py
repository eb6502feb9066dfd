"""Key/value storage backends and the TTL cache built on them."""

from .cache import MISSING, Cache
from .disk import DiskStorage, StorageError
from .memory import MemoryStorage

__all__ = ["MISSING", "Cache", "DiskStorage", "MemoryStorage", "StorageError"]
