"""
PathStore: the path-indexed store engine.

Owns three pieces of state for one store instance:
- the current state tree (replaced wholesale, structurally shared, on every write)
- the initial snapshot (reset target; widened when new defaults are introduced)
- the callback table (top-level key -> handler called after that key's subtree changes)

plus the SubscriptionRegistry deciding who hears about each write.

Writes come in two shapes:
- whole-store: update_all_store() shallow-merges top-level keys, one notification per key
- per-field: update_field(path) binds an updater for one path, notifies overlapping
  listeners and runs the top-level key's callback

Everything here is synchronous: a write, its notifications and its callback all
complete before the updater returns.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generator, Mapping, Optional, Tuple, Union
import logging

from pathstore.access import AccessMode, FieldAccessor
from pathstore.config import StoreConfig, get_default_config
from pathstore.observer import Observer, observing
from pathstore.paths import MISSING, Key, PathLike, get_field, set_field, to_keys, to_path
from pathstore.subscription import SubscriptionRegistry

logger = logging.getLogger(__name__)

Patch = Mapping[str, Any]
PatchOrUpdater = Union[Patch, Callable[[Dict[str, Any]], Patch]]
Updater = Callable[[Any], None]


@dataclass(frozen=True)
class FieldChange:
    """Payload handed to a field callback after a per-field write.

    Attributes:
        path: Canonical dotted path that was written ('cart.price')
        value: The value now stored at path
        previous_value: Value at path when the updater was bound (not when it ran)
        update_value: Updater for the same path that does not re-run the callback
    """
    path: str
    value: Any
    previous_value: Any
    update_value: Updater


FieldCallback = Callable[[FieldChange], None]


class PathStore:
    """Reactive state container addressed by dotted paths.

    Example:
        store = PathStore({'cart': {'price': 10}})
        value, set_price, reset_price = store.read_only.cart.price()
        set_price(lambda price: price + 5)
        store.get_field('cart.price')  # 15

    Thread safety: Not thread-safe (all operations expected on one thread).
    """

    def __init__(
        self,
        initial_state: Optional[Patch] = None,
        initial_callbacks: Optional[Mapping[str, FieldCallback]] = None,
        config: Optional[StoreConfig] = None,
    ):
        """
        Args:
            initial_state: Top-level defaults; becomes both the state and the initial snapshot
            initial_callbacks: Top-level key -> callback table
            config: Store config (process default if omitted)
        """
        self._config = config if config is not None else get_default_config()
        self._state: Dict[str, Any] = dict(initial_state or {})
        self._initial: Dict[str, Any] = self._state
        self._callbacks: Dict[str, FieldCallback] = dict(initial_callbacks or {})
        self._subscriptions = SubscriptionRegistry(self._config)

    # ========== PROPERTIES ==========

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def state(self) -> Dict[str, Any]:
        """Current state tree (the live reference; treat as read-only)."""
        return self._state

    @property
    def initial_state(self) -> Dict[str, Any]:
        """Initial snapshot used by the reset operations."""
        return self._initial

    @property
    def callbacks(self) -> Dict[str, FieldCallback]:
        """Copy of the callback table."""
        return dict(self._callbacks)

    @property
    def subscriptions(self) -> SubscriptionRegistry:
        return self._subscriptions

    # ========== PATH HELPERS ==========

    def _keys(self, path: PathLike) -> Tuple[Key, ...]:
        return to_keys(path, self._config.separator)

    def notification_path(self, path: PathLike = '') -> str:
        """Notification form of path: leading separator, '.' for the whole store."""
        return self._config.separator + to_path(self._keys(path), self._config.separator)

    # ========== READS ==========

    def get_field(self, path: PathLike, default: Any = None) -> Any:
        """Value at path in the current state, or default if it does not resolve."""
        return get_field(self._state, self._keys(path), default)

    def get_initial_field(self, path: PathLike, default: Any = None) -> Any:
        """Value at path in the initial snapshot, or default if it does not resolve."""
        return get_field(self._initial, self._keys(path), default)

    # ========== WHOLE-STORE WRITES ==========

    def update_all_store(self, patch: PatchOrUpdater) -> None:
        """Shallow-merge top-level keys into the state.

        Args:
            patch: Mapping of top-level keys to new values, or a callable that
                   receives the current state and returns such a mapping.

        Only the top-level keys present in the patch are notified; every other
        field keeps its reference and its listeners stay quiet.
        """
        fields = patch(self._state) if callable(patch) else patch
        self._state = {**self._state, **fields}
        logger.debug(f"update_all_store: keys={list(fields)}")
        for key in fields:
            self._subscriptions.notify(self.notification_path((key,)))

    def reset_all_store(self) -> None:
        """Restore every top-level key of the initial snapshot."""
        self.update_all_store(self._initial)

    # ========== PER-FIELD WRITES ==========

    def update_field(self, path: PathLike, call_callback: bool = True) -> Updater:
        """Bind an updater for path.

        The previous value reported to the field callback is captured now,
        at bind time, so a late call still reports the value the caller saw.

        Args:
            path: Non-empty dotted path or key sequence
            call_callback: If False, the updater never runs the field callback

        Returns:
            updater(value_or_fn): writes value (or fn(current_value)) at path,
            notifies overlapping listeners, then runs the callback of the
            path's top-level key if one was registered when bound.
        """
        keys = self._keys(path)
        if not keys:
            raise ValueError("update_field() needs a non-empty path; use update_all_store()")
        prop = to_path(keys, self._config.separator)
        first_key = keys[0]
        has_callback = call_callback and callable(self._callbacks.get(first_key))
        previous_value = get_field(self._state, keys)

        def update(new_value: Any) -> None:
            value = new_value(get_field(self._state, keys)) if callable(new_value) else new_value
            self._state = set_field(self._state, keys, value)
            logger.debug(f"update_field: {prop!r} = {value!r}")
            self._subscriptions.notify(self.notification_path(keys))

            if not has_callback:
                return
            callback = self._callbacks.get(first_key)
            if callable(callback):
                callback(FieldChange(
                    path=prop,
                    value=value,
                    previous_value=previous_value,
                    update_value=self.update_field(keys, call_callback=False),
                ))

        return update

    def reset_field(self, path: PathLike) -> Callable[[], None]:
        """Bind a resetter that writes the initial snapshot's value back to path."""
        keys = self._keys(path)

        def reset() -> None:
            self.update_field(keys)(get_field(self._initial, keys))

        return reset

    # ========== DEFAULTS AND CALLBACKS ==========

    def initialize_field(self, path: PathLike, fallback: Any) -> bool:
        """Give path a value on first access.

        Only fires when the field is absent from both the state and the initial
        snapshot. Both trees receive the fallback, so a later reset returns to
        it. Listeners are not notified here.

        Returns:
            True if the field was initialized, False if it already had a value
        """
        keys = self._keys(path)
        if get_field(self._state, keys, MISSING) is not MISSING:
            return False
        if get_field(self._initial, keys, MISSING) is not MISSING:
            return False
        self._initial = set_field(self._initial, keys, fallback)
        self._state = set_field(self._state, keys, fallback)
        logger.debug(f"Initialized field {to_path(keys, self._config.separator)!r} = {fallback!r}")
        return True

    def merge_defaults(self, defaults: Optional[Patch]) -> None:
        """Widen the state and the initial snapshot with top-level defaults.

        Both trees become the current state merged with defaults. No listeners
        are notified: this runs before anyone can be watching.
        """
        merged = {**self._state, **(defaults or {})}
        self._state = merged
        self._initial = merged

    def merge_callbacks(self, callbacks: Optional[Mapping[str, FieldCallback]]) -> None:
        """Shallow-merge callbacks into the callback table."""
        if callbacks:
            self._callbacks = {**self._callbacks, **callbacks}

    # ========== ACCESSORS AND OBSERVERS ==========

    def accessor(self, mode: AccessMode) -> FieldAccessor:
        """Path builder rooted at this store, dispatching in mode."""
        return FieldAccessor(self, mode)

    @property
    def read_only(self) -> FieldAccessor:
        return FieldAccessor(self, AccessMode.READ)

    @property
    def read_and_subscribe(self) -> FieldAccessor:
        return FieldAccessor(self, AccessMode.SUBSCRIBE)

    @property
    def wrap_for_injection(self) -> FieldAccessor:
        return FieldAccessor(self, AccessMode.WRAP)

    def observer(self, callback: Callable[[], None]) -> Observer:
        """Create an observer token for this store (activate it with `with`)."""
        return Observer(self, callback)

    @contextmanager
    def observing(self, callback: Callable[[], None]) -> Generator[Observer, None, None]:
        """Create, activate and finally close an observer for this store."""
        with observing(self, callback) as observer:
            yield observer

    def __repr__(self) -> str:
        return (
            f"PathStore(keys={list(self._state)}, callbacks={list(self._callbacks)}, "
            f"subscribed_paths={len(self._subscriptions)})"
        )
