"""Tests for observer tokens and activation."""
from pathstore import PathStore, active_observer


def test_watch_subscribes_each_path_once(store, recorder):
    observer = store.observer(recorder())

    assert observer.watch('.cart') is True
    assert observer.watch('.cart') is False
    assert store.subscriptions.listener_count('.cart') == 1
    assert observer.paths == ('.cart',)


def test_observer_calls_its_callback_on_notify(store, recorder):
    callback = recorder()
    observer = store.observer(callback)
    observer.watch('.cart')

    store.update_field('cart.price')(11)

    assert callback.calls == 1


def test_observers_sharing_a_callback_are_distinct_listeners(store, recorder):
    callback = recorder()
    first = store.observer(callback)
    second = store.observer(callback)
    first.watch('.cart')
    second.watch('.cart')

    store.update_field('cart.price')(11)
    assert callback.calls == 2

    first.close()
    store.update_field('cart.price')(12)
    assert callback.calls == 3


def test_close_unsubscribes_everything_once(store, recorder):
    callback = recorder()
    observer = store.observer(callback)
    observer.watch('.cart')
    observer.watch('.user')

    observer.close()
    observer.close()

    assert len(store.subscriptions) == 0
    assert observer.closed
    assert observer.watch('.cart') is False

    store.update_all_store({'cart': {}, 'user': {}})
    assert callback.calls == 0


def test_observer_closed_mid_notification_is_not_called(store, recorder):
    late = recorder('late')
    late_observer = store.observer(late)

    def closer():
        late_observer.close()

    store.observer(closer).watch('.')
    late_observer.watch('.cart')

    store.update_field('cart.price')(11)

    assert late.calls == 0


def test_activation_is_scoped_and_nested(store, recorder):
    outer = store.observer(recorder('outer'))
    inner = store.observer(recorder('inner'))
    other_store = PathStore()

    assert active_observer(store) is None
    with outer:
        assert active_observer(store) is outer
        with inner:
            assert active_observer(store) is inner
            assert active_observer(other_store) is None
        assert active_observer(store) is outer
    assert active_observer(store) is None
    # Leaving the block does not close the observer
    assert not outer.closed


def test_observing_closes_on_exit(store, recorder):
    callback = recorder()

    with store.observing(callback) as observer:
        observer.watch('.cart')
        assert active_observer(store) is observer

    assert observer.closed
    assert len(store.subscriptions) == 0
