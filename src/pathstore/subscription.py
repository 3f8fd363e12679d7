"""
Path-keyed subscription registry.

Maps an observed notification path ('.cart.price', or '.' for the whole
store) to the set of listeners watching it. A write notifies every listener
whose path overlaps the written path in either direction:

- write '.cart.price' wakes listeners on '.cart' (ancestor interest)
- write '.cart' wakes listeners on '.cart.price.tax' (descendant interest)
- write '.' wakes everyone

Listeners are zero-argument callables. The registry never inspects them
beyond hashing and calling.
"""

from typing import Callable, Dict, Hashable, List, Optional, Set
import logging

from pathstore.config import StoreConfig, get_default_config
from pathstore.paths import paths_overlap

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class SubscriptionRegistry:
    """Registry of listeners keyed by notification path.

    Thread safety: Not thread-safe (all operations expected on one thread).
    Re-entrancy: a listener may mutate the store (and thus call notify())
    or subscribe/unsubscribe while a notification is being delivered.
    """

    def __init__(self, config: Optional[StoreConfig] = None):
        self._config = config if config is not None else get_default_config()
        self._listeners: Dict[str, Set[Listener]] = {}

    @property
    def config(self) -> StoreConfig:
        return self._config

    def subscribe(self, path: str, listener: Listener) -> None:
        """Register listener on path. Registering twice is a no-op."""
        self._listeners.setdefault(path, set()).add(listener)
        logger.debug(f"Subscribed listener on {path!r} ({len(self._listeners[path])} on path)")

    def unsubscribe(self, path: str, listener: Listener) -> None:
        """Remove listener from path. Removing an absent listener is a no-op."""
        listeners = self._listeners.get(path)
        if listeners is None or listener not in listeners:
            return
        listeners.discard(listener)
        if not listeners:
            del self._listeners[path]
        logger.debug(f"Unsubscribed listener from {path!r}")

    def is_subscribed(self, path: str, listener: Listener) -> bool:
        return listener in self._listeners.get(path, ())

    def matching_paths(self, path: str) -> List[str]:
        """Registered paths overlapping path, in registration order."""
        separator = self._config.separator
        boundary_aware = self._config.boundary_aware_matching
        return [
            registered for registered in self._listeners
            if paths_overlap(registered, path, separator, boundary_aware)
        ]

    def notify(self, path: str) -> int:
        """Call every listener whose registered path overlaps path.

        Each eligible listener fires once per call, even when several of its
        registered paths overlap. Listener sets are snapshotted up front:
        listeners added during delivery wait for the next notify(), and a
        listener removed during delivery is skipped if not yet called.

        Args:
            path: Notification path that was written

        Returns:
            Number of listeners called
        """
        pending = [
            (registered, list(self._listeners[registered]))
            for registered in self.matching_paths(path)
        ]
        called: Set[Hashable] = set()
        for registered, listeners in pending:
            for listener in listeners:
                if listener in called:
                    continue
                # Unsubscribed by an earlier listener in this same delivery
                if not self.is_subscribed(registered, listener):
                    continue
                called.add(listener)
                self._call(listener, path)

        if called:
            logger.debug(f"Notified {len(called)} listener(s) for {path!r}")
        return len(called)

    def _call(self, listener: Listener, path: str) -> None:
        try:
            listener()
        except Exception as e:
            logger.warning(f"Listener failed while notifying {path!r}: {e}")
            if self._config.propagate_listener_errors:
                raise

    # ========== INSPECTION ==========

    def paths(self) -> List[str]:
        """All paths that currently have at least one listener."""
        return list(self._listeners)

    def listener_count(self, path: Optional[str] = None) -> int:
        """Number of listeners on path, or on all paths if path is None."""
        if path is not None:
            return len(self._listeners.get(path, ()))
        return sum(len(listeners) for listeners in self._listeners.values())

    def clear(self) -> None:
        """Drop every registration."""
        self._listeners.clear()

    def __contains__(self, path: str) -> bool:
        return path in self._listeners

    def __len__(self) -> int:
        return len(self._listeners)
