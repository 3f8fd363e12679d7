"""Tests for store configuration."""
import pytest

from pathstore import PathStore, StoreConfig, get_default_config, set_default_config


def test_default_config():
    config = get_default_config()

    assert config.separator == '.'
    assert config.boundary_aware_matching is True
    assert config.propagate_listener_errors is False
    assert config.root_path == '.'


def test_separator_must_be_one_character():
    with pytest.raises(ValueError):
        StoreConfig(separator='::')


def test_with_overrides_returns_a_copy():
    config = StoreConfig()
    strict = config.with_overrides(propagate_listener_errors=True)

    assert strict.propagate_listener_errors is True
    assert config.propagate_listener_errors is False


def test_store_reads_default_at_construction():
    before = PathStore()
    set_default_config(StoreConfig(separator='/'))
    after = PathStore()

    assert before.config.separator == '.'
    assert after.config.separator == '/'
    assert after.subscriptions.config is after.config
