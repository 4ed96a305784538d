"""Memoized constructors for locale-sensitive formatters.

Constructing a Babel-backed formatter means parsing locale data and building
patterns, so each formatter kind is constructed through a memoizing wrapper
that returns the identical instance for structurally equal arguments.

Architecture:
    - One MemoizedConstructor per formatter kind
    - Immutable cache keys (tuples of hashable types)
    - Keyword order does not affect the key
    - No eviction: the key space is bounded by application configuration
    - Unhashable arguments bypass the cache (fresh instance, counted)

Cache Key Structure:
    (args_tuple, kwargs_tuple)
    - args_tuple: tuple[HashableValue, ...]
    - kwargs_tuple: tuple[tuple[str, HashableValue], ...] (sorted)

Thread Safety:
    Lookups and inserts are protected by a Lock. Two concurrent first uses of
    the same key may both construct; the first insert wins and every later
    read observes that one instance.

Python 3.13+.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import date, datetime
from decimal import Decimal
from threading import Lock
from typing import Any, cast

__all__ = ["HashableValue", "MemoizedConstructor", "memoize_constructor"]

logger = logging.getLogger(__name__)

# Recursive definition: primitives plus tuple/frozenset of self.
type HashableValue = (
    str
    | int
    | float
    | bool
    | Decimal
    | datetime
    | date
    | None
    | tuple["HashableValue", ...]
    | frozenset["HashableValue"]
)

type _CacheKey = tuple[tuple[HashableValue, ...], tuple[tuple[str, HashableValue], ...]]


class MemoizedConstructor[T]:
    """Memoizing wrapper around a formatter constructor.

    Calling the wrapper with ``(*args, **kwargs)`` returns the cached instance
    constructed earlier with structurally equal arguments, or constructs and
    caches a new one.

    Attributes:
        constructor: The wrapped constructor
        hits: Number of cache hits (for metrics)
        misses: Number of cache misses (for metrics)
    """

    __slots__ = ("_cache", "_constructor", "_hits", "_lock", "_misses", "_unhashable_skips")

    def __init__(self, constructor: Callable[..., T]) -> None:
        """Initialize memoized constructor.

        Args:
            constructor: Class or factory function producing formatter instances
        """
        if not callable(constructor):
            msg = "constructor must be callable"
            raise TypeError(msg)

        self._constructor = constructor
        self._cache: dict[_CacheKey, T] = {}
        self._lock = Lock()
        self._hits = 0
        self._misses = 0
        self._unhashable_skips = 0

    def __call__(self, *args: Any, **kwargs: Any) -> T:
        """Get the cached instance for these arguments, constructing on miss."""
        key = self._make_key(args, kwargs)

        if key is None:
            with self._lock:
                self._unhashable_skips += 1
                self._misses += 1
            return self._constructor(*args, **kwargs)

        with self._lock:
            if key in self._cache:
                self._hits += 1
                return self._cache[key]
            self._misses += 1

        # Construct outside the lock; construction may be slow
        instance = self._constructor(*args, **kwargs)
        logger.debug("Constructed %s for %r", self.name, key)

        with self._lock:
            # Double-check: a concurrent caller may have inserted first
            return self._cache.setdefault(key, instance)

    @property
    def constructor(self) -> Callable[..., T]:
        """The wrapped constructor."""
        return self._constructor

    @property
    def name(self) -> str:
        """Readable name of the wrapped constructor (for logs)."""
        return getattr(self._constructor, "__qualname__", type(self._constructor).__name__)

    def clear(self) -> None:
        """Drop all cached instances and reset metrics."""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0
            self._unhashable_skips = 0

    def get_stats(self) -> dict[str, int | float]:
        """Get cache statistics.

        Returns:
            Dict with keys:
            - size (int): Current number of cached instances
            - hits (int): Number of cache hits
            - misses (int): Number of cache misses
            - hit_rate (float): Hit rate as percentage (0.0-100.0)
            - unhashable_skips (int): Calls that bypassed the cache
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0

            return {
                "size": len(self._cache),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
                "unhashable_skips": self._unhashable_skips,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __repr__(self) -> str:
        return f"MemoizedConstructor({self.name}, size={len(self)})"

    @staticmethod
    def _make_hashable(value: object) -> HashableValue:
        """Convert potentially unhashable value to hashable equivalent.

        Converts:
            - list/tuple -> tuple (recursively)
            - Mapping -> tuple of sorted key-value tuples (recursively)
            - set/frozenset -> frozenset (recursively)
            - Other values -> unchanged (hashability checked by caller)
        """
        match value:
            case list() | tuple():
                return tuple(MemoizedConstructor._make_hashable(v) for v in value)
            case Mapping():
                return tuple(
                    sorted(
                        (k, MemoizedConstructor._make_hashable(v))
                        for k, v in value.items()
                    )
                )
            case set() | frozenset():
                return frozenset(MemoizedConstructor._make_hashable(v) for v in value)
            case _:
                return cast(HashableValue, value)

    @staticmethod
    def _make_key(args: tuple[Any, ...], kwargs: Mapping[str, Any]) -> _CacheKey | None:
        """Create immutable cache key from constructor arguments.

        Sorting keyword items is required for correctness: ``f(a=1, b=2)`` and
        ``f(b=2, a=1)`` must share one cached instance.

        Returns:
            Immutable cache key tuple, or None if the arguments cannot be made
            hashable (deep nesting, unorderable mapping keys, opaque objects)
        """
        try:
            args_key = tuple(MemoizedConstructor._make_hashable(a) for a in args)
            kwargs_key = tuple(
                sorted((k, MemoizedConstructor._make_hashable(v)) for k, v in kwargs.items())
            )
            key = (args_key, kwargs_key)
            hash(key)
        except (TypeError, RecursionError):
            return None
        return key


def memoize_constructor[T](constructor: Callable[..., T]) -> MemoizedConstructor[T]:
    """Wrap a formatter constructor in a memoizing cache.

    Example:
        >>> get_number_format = memoize_constructor(NumberFormat)
        >>> get_number_format("en", style="percent") is get_number_format("en", style="percent")
        True
    """
    return MemoizedConstructor(constructor)
