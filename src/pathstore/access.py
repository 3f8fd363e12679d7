"""
Access dispatcher: one path-building surface, three call modes.

A FieldAccessor accumulates keys, then dispatches when called:

    store.read_only.cart.price()                 # FieldHandle(value, update, reset)
    store.read_and_subscribe.cart.price(0)       # same, and the active observer watches '.cart.price'
    store.wrap_for_injection.cart.price(view, 0) # view wrapped to receive store=FieldHandle(...)

Calling with no accumulated path addresses the whole store and returns
FieldHandle(state, update_all_store, reset_all_store).

The explicit builder API is equivalent and avoids clashes between keys and
accessor methods:

    store.read_only.field('cart')['price'].read_and_subscribe(0)

Builders are immutable: every field() step returns a new accessor, so a
partially built accessor can be kept and reused.
"""

from enum import Enum
from functools import wraps
from typing import TYPE_CHECKING, Any, Callable, NamedTuple, Tuple
import logging

from pathstore.observer import active_observer
from pathstore.paths import MISSING, Key, to_path

if TYPE_CHECKING:
    from pathstore.store import PathStore

logger = logging.getLogger(__name__)


class AccessMode(Enum):
    """What a terminal call does with the resolved path."""
    READ = 'read'
    SUBSCRIBE = 'subscribe'
    WRAP = 'wrap'


class FieldHandle(NamedTuple):
    """Result of a read: unpacks as (value, update, reset)."""
    value: Any
    update: Callable[[Any], None]
    reset: Callable[[], None]


class FieldAccessor:
    """Immutable path builder bound to a store and a call mode.

    Attribute access appends a key (`accessor.cart.price`). Names starting with
    an underscore are reserved and raise AttributeError, so capability checks
    such as hasattr(accessor, '__len__') never leak into the path. Keys that
    collide with accessor methods (`get`, `field`, `path`, ...) or that are not
    identifiers go through field() or indexing instead.
    """

    # Indexing appends keys; without this, iter() would walk keys 0, 1, 2, ... forever
    __iter__ = None

    def __init__(self, store: 'PathStore', mode: AccessMode, keys: Tuple[Key, ...] = ()):
        object.__setattr__(self, '_store', store)
        object.__setattr__(self, '_mode', mode)
        object.__setattr__(self, '_keys', tuple(keys))

    # ========== PATH BUILDING ==========

    def field(self, key: Key) -> 'FieldAccessor':
        """Return a new accessor one level deeper."""
        if key == '':
            raise ValueError("Path keys cannot be empty")
        return FieldAccessor(self._store, self._mode, self._keys + (key,))

    def __getattr__(self, name: str) -> 'FieldAccessor':
        if name.startswith('_'):
            raise AttributeError(name)
        return self.field(name)

    def __getitem__(self, key: Key) -> 'FieldAccessor':
        return self.field(key)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("FieldAccessor is read-only. Call it to get an updater.")

    @property
    def mode(self) -> AccessMode:
        return self._mode

    @property
    def keys(self) -> Tuple[Key, ...]:
        return self._keys

    @property
    def path(self) -> str:
        """Canonical dotted path ('' for the whole store)."""
        return to_path(self._keys, self._store.config.separator)

    # ========== DISPATCH ==========

    def __call__(self, *args: Any) -> Any:
        """Dispatch on mode.

        READ / SUBSCRIBE: accessor(fallback=MISSING) -> FieldHandle
        WRAP:             accessor(consumer, fallback=MISSING) -> wrapped consumer
        """
        if self._mode is AccessMode.WRAP:
            return self._wrap(*args)
        return self._resolve(self._mode is AccessMode.SUBSCRIBE, *args)

    def get(self, fallback: Any = MISSING) -> FieldHandle:
        """Read without subscribing, whatever this accessor's mode."""
        return self._resolve(False, fallback)

    def read_and_subscribe(self, fallback: Any = MISSING) -> FieldHandle:
        """Read and make the active observer watch this path."""
        return self._resolve(True, fallback)

    def wrap_for_injection(self, fallback: Any = MISSING) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Return a decorator injecting this path's FieldHandle as `store=`."""
        def decorator(consumer: Callable[..., Any]) -> Callable[..., Any]:
            return self._wrap(consumer, fallback)
        return decorator

    def _resolve(self, subscribe: bool, fallback: Any = MISSING) -> FieldHandle:
        store = self._store

        if not self._keys:
            if subscribe:
                self._subscribe(store.notification_path())
            return FieldHandle(store.state, store.update_all_store, store.reset_all_store)

        update = store.update_field(self._keys)
        reset = store.reset_field(self._keys)
        initialized = fallback is not MISSING and store.initialize_field(self._keys, fallback)
        value = store.get_field(self._keys)

        if subscribe:
            # Let existing subscribers and the field callback see the new default
            if initialized:
                update(value)
            self._subscribe(store.notification_path(self._keys))

        return FieldHandle(value, update, reset)

    def _subscribe(self, path: str) -> None:
        observer = active_observer(self._store)
        if observer is None:
            logger.warning(f"read_and_subscribe({path!r}) with no active observer; reading without subscribing")
            return
        observer.watch(path)

    def _wrap(self, consumer: Callable[..., Any], fallback: Any = MISSING) -> Callable[..., Any]:
        accessor = FieldAccessor(self._store, AccessMode.SUBSCRIBE, self._keys)
        name = getattr(consumer, 'display_name', None) or getattr(consumer, '__name__', None) or 'Consumer'

        @wraps(consumer)
        def with_store(*args: Any, **kwargs: Any) -> Any:
            return consumer(*args, store=accessor._resolve(True, fallback), **kwargs)

        with_store.display_name = f"with_store({name})"
        return with_store

    def __repr__(self) -> str:
        return f"FieldAccessor(mode={self._mode.value}, path={self.path!r})"
