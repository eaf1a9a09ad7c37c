"""Listener route cache for the event dispatcher.

Resolving which listeners an event reaches means walking the tree and
collecting registrations on every node of the route. The result only
changes when the topology around a route changes or when a node on it
gains or loses a listener, so the dispatcher caches it here.

Each entry remembers the guids of its origin and of every node its route
walked over. Entries are indexed by those guids, so invalidation only looks
at the entries that touch the nodes involved.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Hashable, Iterable, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)

Route = List[Tuple[Any, Callable[..., Any]]]
CacheKey = Tuple[str, str, Hashable]


@dataclass
class CacheEntry:
    """A resolved listener route."""
    route: Route
    guids: FrozenSet[str]


class ListenerCache:
    """Cache of resolved listener routes keyed by (origin guid, event, kind).

    ``kind`` is whatever the dispatcher uses to tell route shapes apart
    (a Direction for emits, an EventScope for announcements).
    """

    def __init__(self):
        self.cache: Dict[CacheKey, CacheEntry] = {}
        # guid -> keys of the entries whose route touches that guid
        self._index: Dict[str, Set[CacheKey]] = {}
        self.hits = 0
        self.misses = 0
        self.invalidations = 0

    def __len__(self) -> int:
        return len(self.cache)

    def get(self, key: CacheKey) -> Optional[Route]:
        """Return the cached route for key, or None on a miss."""
        entry = self.cache.get(key)
        if entry is None:
            self.misses += 1
            return None
        self.hits += 1
        return entry.route

    def put(self, key: CacheKey, route: Route, guids: Iterable[str]) -> None:
        """Store a resolved route together with the guids it touched.

        The origin guid (key[0]) is always recorded, even when the route
        reached no other node.
        """
        if key in self.cache:
            self._remove(key)
        entry = CacheEntry(route=route, guids=frozenset(guids) | {key[0]})
        self.cache[key] = entry
        for guid in entry.guids:
            self._index.setdefault(guid, set()).add(key)

    def invalidate(self, flow: Any) -> int:
        """Drop every route affected by flow gaining or losing a child.

        A route that changes shape when flow's children change passes over
        flow itself (downstream routes from flow or its ancestors, upstream
        routes from a detached subtree) or over the child that was just
        attached (upstream routes from inside that subtree). So it is
        enough to drop the entries touching flow or one of its current
        children.

        Args:
            flow: Node whose children changed

        Returns:
            Number of entries removed
        """
        self.invalidations += 1
        guids = [flow.guid] + [child.guid for child in flow._children]
        count = self._remove_touching(guids)
        if count:
            logger.debug("Invalidated %d listener routes around %r", count, flow)
        return count

    def discard(self, flow: Any) -> int:
        """Drop every route that starts at or passes over flow.

        Called when flow's own listener registrations change and when
        flow is disposed.

        Returns:
            Number of entries removed
        """
        return self._remove_touching([flow.guid])

    def invalidate_all(self) -> int:
        """Clear the whole cache.

        Returns:
            Number of entries removed
        """
        count = len(self.cache)
        self.cache.clear()
        self._index.clear()
        return count

    def get_stats(self) -> Dict[str, Any]:
        """Return cache statistics."""
        total = self.hits + self.misses
        return {
            'entries': len(self.cache),
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': self.hits / total if total > 0 else 0.0,
            'invalidations': self.invalidations,
        }

    def _remove_touching(self, guids: Iterable[str]) -> int:
        keys = set()
        for guid in guids:
            keys.update(self._index.get(guid, ()))
        for key in keys:
            self._remove(key)
        return len(keys)

    def _remove(self, key: CacheKey) -> None:
        entry = self.cache.pop(key)
        for guid in entry.guids:
            keys = self._index.get(guid)
            if keys is None:
                continue
            keys.discard(key)
            if not keys:
                del self._index[guid]
