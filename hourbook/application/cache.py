"""
Per-request entity cache.
Reads go through the cache; every mutation invalidates what it touched and is
followed by a fresh read from the store.
"""

import logging
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')

_MISSING = object()


class EntityCache:
    """
    Cache keyed by (kind, id), plus cached list queries keyed by (kind, query).
    A list query is dropped whenever any entity of its kind is invalidated.
    """

    def __init__(self):
        self._entities: Dict[Tuple[str, Hashable], Any] = {}
        self._queries: Dict[Tuple[str, Hashable], List[Any]] = {}
        self.hits = 0
        self.misses = 0

    def get(self, kind: str, entity_id: Hashable, loader: Callable[[Hashable], Optional[T]]) -> Optional[T]:
        key = (kind, entity_id)
        cached = self._entities.get(key, _MISSING)
        if cached is not _MISSING:
            self.hits += 1
            return cached

        self.misses += 1
        value = loader(entity_id)
        if value is not None:
            self._entities[key] = value
        return value

    def get_list(self, kind: str, query: Hashable, loader: Callable[[], Iterable[T]]) -> List[T]:
        key = (kind, query)
        cached = self._queries.get(key, _MISSING)
        if cached is not _MISSING:
            self.hits += 1
            return list(cached)

        self.misses += 1
        values = list(loader())
        self._queries[key] = values
        for value in values:
            entity_id = getattr(value, "id", None)
            if entity_id is not None:
                self._entities[(kind, entity_id)] = value
        return list(values)

    def invalidate(self, kind: str, entity_id: Optional[Hashable] = None) -> None:
        """Drop one entity (or every entity of a kind) and all list queries of that kind."""
        if entity_id is None:
            self._entities = {k: v for k, v in self._entities.items() if k[0] != kind}
        else:
            self._entities.pop((kind, entity_id), None)
        self._queries = {k: v for k, v in self._queries.items() if k[0] != kind}
        logger.debug(f"Cache invalidated: {kind} {entity_id if entity_id is not None else '*'}")

    def refetch(self, kind: str, entity_id: Hashable, loader: Callable[[Hashable], Optional[T]]) -> Optional[T]:
        """Invalidate and read again from the store."""
        self.invalidate(kind, entity_id)
        return self.get(kind, entity_id, loader)

    def clear(self) -> None:
        self._entities.clear()
        self._queries.clear()

    def __len__(self) -> int:
        return len(self._entities)
