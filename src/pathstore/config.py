"""
Store configuration.

Holds the knobs shared by every PathStore: the path separator, how the
subscription registry matches overlapping paths, and what happens when a
listener raises during notification.

A store reads the process default once, at construction. Replacing the
default afterwards only affects stores created later.
"""

from dataclasses import dataclass, replace
from typing import Any
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreConfig:
    """Immutable configuration for a PathStore.

    Attributes:
        separator: Single character joining path keys ("cart.price").
                   The bare separator is the whole-store path.
        boundary_aware_matching: If True (default), "cart" overlaps "cart.price"
                   but not "cartX". If False, plain string-prefix matching is used.
        propagate_listener_errors: If True, a listener exception is re-raised
                   after logging instead of being swallowed.
    """
    separator: str = "."
    boundary_aware_matching: bool = True
    propagate_listener_errors: bool = False

    def __post_init__(self):
        if len(self.separator) != 1:
            raise ValueError(f"separator must be a single character, got {self.separator!r}")

    @property
    def root_path(self) -> str:
        """Notification path meaning "whole store"."""
        return self.separator

    def with_overrides(self, **overrides: Any) -> 'StoreConfig':
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)


_default_config: StoreConfig = StoreConfig()


def set_default_config(config: StoreConfig) -> None:
    """Set the config used by stores created without an explicit one.

    Args:
        config: The new process default
    """
    global _default_config
    _default_config = config
    logger.debug(f"Default store config set: {config}")


def get_default_config() -> StoreConfig:
    """Get the config used by stores created without an explicit one."""
    return _default_config
