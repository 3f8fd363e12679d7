"""
Binding between a PathStore and the host that owns its lifetime.

The host (an app shell, a root widget, a test) mounts the binding once with
optional store/callback overrides, then pushes new values through update():

    bundle = create_store({'count': 0})
    bundle.binding.mount(store={'user': None}, callbacks={'count': log_count})
    ...
    bundle.binding.update(store={'user': current_user})
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Optional
import logging

from pathstore.access import FieldAccessor
from pathstore.config import StoreConfig
from pathstore.store import FieldCallback, PathStore

logger = logging.getLogger(__name__)


class StoreBinding:
    """Applies host-supplied overrides to a store.

    The first mount() merges overrides into the state and the initial snapshot
    (they become reset targets) and into the callback table. That merge happens
    exactly once per binding; every later call behaves like update().
    """

    def __init__(self, store: PathStore):
        self._store = store
        self._mounted = False

    @property
    def store(self) -> PathStore:
        return self._store

    @property
    def mounted(self) -> bool:
        return self._mounted

    def mount(
        self,
        store: Optional[Mapping[str, Any]] = None,
        callbacks: Optional[Mapping[str, FieldCallback]] = None,
    ) -> None:
        """Merge defaults and callbacks on first mount; update afterwards."""
        if self._mounted:
            self.update(store, callbacks)
            return
        self._store.merge_defaults(store)
        self._store.merge_callbacks(callbacks)
        self._mounted = True
        logger.debug(f"Mounted store binding: defaults={list(store or {})}, callbacks={list(callbacks or {})}")

    def update(
        self,
        store: Optional[Mapping[str, Any]] = None,
        callbacks: Optional[Mapping[str, FieldCallback]] = None,
    ) -> None:
        """Merge new callbacks, then write the store patch through update_all_store()."""
        self._store.merge_callbacks(callbacks)
        self._store.update_all_store(store or {})


@dataclass(frozen=True)
class StoreBundle:
    """Everything create_store() hands back.

    Unpacks as (binding, read_and_subscribe, read_only, wrap_for_injection);
    the engine itself is available as `.store`.
    """
    binding: StoreBinding
    read_and_subscribe: FieldAccessor
    read_only: FieldAccessor
    wrap_for_injection: FieldAccessor
    store: PathStore = field(repr=False)

    def __iter__(self) -> Iterator[Any]:
        return iter((self.binding, self.read_and_subscribe, self.read_only, self.wrap_for_injection))


def create_store(
    initial_state: Optional[Mapping[str, Any]] = None,
    initial_callbacks: Optional[Mapping[str, FieldCallback]] = None,
    config: Optional[StoreConfig] = None,
) -> StoreBundle:
    """Create a store and its access surfaces.

    Args:
        initial_state: Top-level defaults (state and initial snapshot)
        initial_callbacks: Top-level key -> field callback
        config: Store config (process default if omitted)

    Returns:
        StoreBundle(binding, read_and_subscribe, read_only, wrap_for_injection, store)
    """
    store = PathStore(initial_state, initial_callbacks, config)
    return StoreBundle(
        binding=StoreBinding(store),
        read_and_subscribe=store.read_and_subscribe,
        read_only=store.read_only,
        wrap_for_injection=store.wrap_for_injection,
        store=store,
    )
