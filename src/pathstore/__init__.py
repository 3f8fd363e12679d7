"""
Reactive, path-addressable state container.

Callers read and write arbitrarily nested fields of one in-memory tree by
dotted path. Only the observers whose watched path overlaps the written path
are notified.

Key Features:
- Copy-on-write nested updates with structural sharing
- Prefix-overlap subscriptions (ancestors and descendants of a write are notified)
- Per-field updaters and resetters, with per-top-level-key callbacks
- One path-building surface with three modes: read, read-and-subscribe, wrap-for-injection
- Contextvars-scoped observers, no process-wide singletons

Quick Start:
    >>> from pathstore import create_store
    >>>
    >>> bundle = create_store({'cart': {'price': 10}})
    >>> store = bundle.store
    >>>
    >>> with store.observing(lambda: print('cart changed')):
    ...     price, set_price, reset_price = bundle.read_and_subscribe.cart.price()
    ...     set_price(lambda p: p + 5)
    cart changed
    >>> bundle.read_only.cart.price().value
    15

Modules:
    - paths: Path codec (split/join, resolve, copy-on-write replace, prefix matching)
    - subscription: Path-keyed listener registry
    - store: PathStore engine (reads, updates, resets, callbacks, defaults)
    - observer: Observer tokens and the active-observer context
    - access: FieldAccessor path builder and mode dispatch
    - binding: Host binding and create_store()
    - config: Store configuration
"""

# Configuration
from pathstore.config import (
    StoreConfig,
    set_default_config,
    get_default_config,
)

# Path codec
from pathstore.paths import (
    DOT,
    MISSING,
    to_keys,
    to_path,
    get_field,
    set_field,
    is_path_prefix,
    paths_overlap,
)

# Registry and observers
from pathstore.subscription import SubscriptionRegistry
from pathstore.observer import Observer, active_observer, observing

# Dispatcher
from pathstore.access import AccessMode, FieldAccessor, FieldHandle

# Engine and binding
from pathstore.store import FieldChange, PathStore
from pathstore.binding import StoreBinding, StoreBundle, create_store

__all__ = [
    # Configuration
    'StoreConfig',
    'set_default_config',
    'get_default_config',
    # Path codec
    'DOT',
    'MISSING',
    'to_keys',
    'to_path',
    'get_field',
    'set_field',
    'is_path_prefix',
    'paths_overlap',
    # Registry and observers
    'SubscriptionRegistry',
    'Observer',
    'active_observer',
    'observing',
    # Dispatcher
    'AccessMode',
    'FieldAccessor',
    'FieldHandle',
    # Engine and binding
    'FieldChange',
    'PathStore',
    'StoreBinding',
    'StoreBundle',
    'create_store',
]

__version__ = '1.0.0'
__description__ = 'Reactive, path-addressable state container'
