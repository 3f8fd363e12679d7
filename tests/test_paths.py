"""Tests for the path codec."""
import pytest

from pathstore import MISSING, get_field, is_path_prefix, paths_overlap, set_field, to_keys, to_path


def test_to_keys_splits_dotted_paths():
    assert to_keys('cart.price') == ('cart', 'price')
    assert to_keys(['cart', 0, 'sku']) == ('cart', 0, 'sku')
    assert to_keys('') == ()


def test_to_keys_rejects_empty_keys():
    for path in ('cart..price', '.cart', 'cart.'):
        with pytest.raises(ValueError):
            to_keys(path)


def test_to_path_joins_keys():
    assert to_path(('cart', 'items', 0)) == 'cart.items.0'
    assert to_path(('a', 'b'), separator='/') == 'a/b'


def test_get_field_walks_mappings_and_sequences(cart_state):
    assert get_field(cart_state, 'cart.price') == 10
    assert get_field(cart_state, 'cart.items.0.sku') == 'A1'
    assert get_field(cart_state, ('cart', 'items', 0, 'qty')) == 1
    assert get_field(cart_state, '') is cart_state


def test_get_field_missing_paths_return_default(cart_state):
    assert get_field(cart_state, 'cart.discount') is None
    assert get_field(cart_state, 'cart.price.currency') is None
    assert get_field(cart_state, 'cart.items.5.sku') is None
    assert get_field(cart_state, 'nope.deeper.still', default=MISSING) is MISSING
    assert get_field(None, 'anything') is None


def test_get_field_distinguishes_none_from_missing():
    tree = {'a': None}
    assert get_field(tree, 'a', MISSING) is None
    assert get_field(tree, 'b', MISSING) is MISSING


def test_set_field_shares_untouched_siblings(cart_state):
    new_state = set_field(cart_state, 'cart.price', 15)

    assert new_state is not cart_state
    assert new_state['cart'] is not cart_state['cart']
    assert new_state['cart']['price'] == 15
    assert new_state['user'] is cart_state['user']
    assert new_state['cart']['items'] is cart_state['cart']['items']
    # Input untouched
    assert cart_state['cart']['price'] == 10


def test_set_field_keeps_sequence_types():
    tree = {'rows': [{'v': 1}, {'v': 2}], 'pair': (1, 2)}

    new_tree = set_field(tree, 'rows.1.v', 20)
    assert isinstance(new_tree['rows'], list)
    assert new_tree['rows'][1] == {'v': 20}
    assert new_tree['rows'][0] is tree['rows'][0]

    new_tree = set_field(tree, ('pair', 0), 10)
    assert new_tree['pair'] == (10, 2)


def test_set_field_creates_missing_intermediates():
    new_tree = set_field({}, 'a.b.c', 1)
    assert new_tree == {'a': {'b': {'c': 1}}}

    # Non-container intermediates are replaced by mappings
    new_tree = set_field({'a': 5}, 'a.b', 1)
    assert new_tree == {'a': {'b': 1}}


def test_set_field_pads_sequences():
    new_tree = set_field({'xs': [1]}, 'xs.3', 4)
    assert new_tree['xs'] == [1, None, None, 4]


def test_int_and_string_keys_address_the_same_mapping_field():
    tree = set_field({'cart': {}}, ('cart', 'slots', 0), 5)

    assert tree == {'cart': {'slots': {'0': 5}}}
    assert get_field(tree, 'cart.slots.0') == 5
    assert get_field(tree, ('cart', 'slots', 0)) == 5

    tree = set_field(tree, 'cart.slots.0', 6)
    assert tree['cart']['slots'] == {'0': 6}


def test_non_ascii_digits_are_not_sequence_indexes():
    assert get_field({'a': [1]}, 'a.²') is None
    assert get_field({'a': [1]}, 'a.١', default=MISSING) is MISSING

    new_tree = set_field({'a': [1]}, 'a.²', 2)
    assert new_tree['a'] == {'0': 1, '²': 2}


def test_non_index_key_on_sequence_keeps_items():
    tree = {'xs': [{'v': 1}, 2]}

    new_tree = set_field(tree, 'xs.extra', True)

    assert new_tree['xs'] == {'0': {'v': 1}, '1': 2, 'extra': True}
    assert new_tree['xs']['0'] is tree['xs'][0]
    assert get_field(new_tree, 'xs.1') == 2


def test_set_field_requires_a_path():
    with pytest.raises(ValueError):
        set_field({}, '', 1)


def test_prefix_matching_respects_key_boundaries():
    assert is_path_prefix('.cart', '.cart.price')
    assert is_path_prefix('.cart', '.cart')
    assert is_path_prefix('.', '.cart.price')
    assert not is_path_prefix('.cart', '.cartX')
    assert not is_path_prefix('.cart.price', '.cart')


def test_plain_prefix_matching_when_boundaries_disabled():
    assert is_path_prefix('.cart', '.cartX', boundary_aware=False)


def test_paths_overlap_is_two_directional():
    assert paths_overlap('.cart', '.cart.price')
    assert paths_overlap('.cart.price.tax', '.cart')
    assert not paths_overlap('.user.name', '.cart.price')
    assert not paths_overlap('.cart', '.cartX')
