from threading import RLock
from typing import Any
from typing import Callable
from typing import TypeVar


miss = object()

T = TypeVar("T")
F = Callable[[T], Any]


class LFUCache(dict):
    """Simple LFU cache implementation.

    This cache is designed for memoizing functions with a single hashable
    argument. The eviction policy is LFU, i.e. the least frequently used values
    are evicted when the cache is full.
    """

    def __init__(self, maxsize: int = 256) -> None:
        self.maxsize = maxsize
        self.lock = RLock()

    def get(self, key: T, f: F) -> Any:  # type: ignore[override]
        """Get a value from the cache.

        If the value with the given key is not in the cache, the function ``f``
        is called on the key to generate it. The return value is then stored in
        the cache and returned to the caller.
        """
        with self.lock:
            _ = super(LFUCache, self).get(key, miss)
            if _ is not miss:
                value, count = _
                self[key] = (value, count + 1)
                return value

            # Cache miss: evict half of the entries when we go over the threshold
            while len(self) >= self.maxsize:
                for h in sorted(self, key=lambda h: self[h][1])[: self.maxsize >> 1]:
                    del self[h]

            value = f(key)
            self[key] = (value, 1)
            return value


def cached(maxsize: int = 256) -> Callable[[F], F]:
    """Decorator for memoizing functions of a single argument (LFU policy)."""

    def cached_wrapper(f: F) -> F:
        cache = LFUCache(maxsize)

        def cached_f(key: T) -> Any:
            return cache.get(key, f)

        cached_f.invalidate = cache.clear  # type: ignore[attr-defined]
        cached_f.__wrapped__ = f  # type: ignore[attr-defined]

        return cached_f

    return cached_wrapper
