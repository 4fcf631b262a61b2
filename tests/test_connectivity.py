"""
Connectivity Tests

Tests for Subscription, DisconnectListener and PollingConnectivityWatcher.

To run:
    pytest tests/test_connectivity.py -v
"""

import threading

import pytest

from hostwatch.reachability import (
    ChangeNotifier,
    DisconnectListener,
    PollingConnectivityWatcher,
    StaticNetworkGate,
    Subscription,
)


def flip_until(gate, event, attempts=100):
    """Toggle the gate until the watcher reports a change."""
    for _ in range(attempts):
        gate.connected = not gate.connected
        if event.wait(timeout=0.05):
            return True
    return False


@pytest.fixture
def notifier(listener):
    return ChangeNotifier(listener)


# =============================================================================
# SUBSCRIPTION TESTS
# =============================================================================


@pytest.mark.unit
def test_subscription_releases_once():
    released = []
    subscription = Subscription(lambda: released.append(1))

    assert subscription.active is True
    subscription.unsubscribe()
    subscription.unsubscribe()

    assert released == [1]
    assert subscription.active is False


# =============================================================================
# DISCONNECT LISTENER TESTS
# =============================================================================


@pytest.mark.unit
def test_network_loss_forces_unreachable(gate, notifier, listener):
    notifier.report(True)
    disconnect = DisconnectListener(gate, notifier)

    gate.connected = False
    disconnect.on_connectivity_changed()

    assert listener.calls == [True, False]
    assert notifier.is_reachable is False


@pytest.mark.unit
def test_network_loss_while_unreachable_is_ignored(gate, notifier, listener):
    notifier.report(False)
    gate.connected = False

    DisconnectListener(gate, notifier).on_connectivity_changed()

    assert listener.calls == [False]


@pytest.mark.unit
def test_network_loss_before_first_check_is_ignored(gate, notifier, listener):
    gate.connected = False

    DisconnectListener(gate, notifier).on_connectivity_changed()

    assert listener.calls == []
    assert notifier.state.has_checked is False


@pytest.mark.unit
def test_network_regained_is_left_to_the_probe(gate, notifier, listener):
    notifier.report(False)

    DisconnectListener(gate, notifier).on_connectivity_changed()

    assert listener.calls == [False]


@pytest.mark.unit
def test_attach_and_detach(gate, notifier, listener, watcher):
    notifier.report(True)
    disconnect = DisconnectListener(gate, notifier)

    disconnect.attach(watcher)
    assert len(watcher.callbacks) == 1

    gate.connected = False
    watcher.emit()
    assert listener.calls == [True, False]

    disconnect.detach()
    disconnect.detach()
    assert watcher.callbacks == []


@pytest.mark.unit
def test_event_delivered_after_detach_is_ignored(gate, notifier, listener, watcher):
    notifier.report(True)
    disconnect = DisconnectListener(gate, notifier)
    disconnect.attach(watcher)
    # a polling thread may hold a copy of the callback list
    dispatched = list(watcher.callbacks)

    disconnect.detach()
    gate.connected = False
    for callback in dispatched:
        callback()

    assert disconnect.detached is True
    assert listener.calls == [True]
    assert notifier.is_reachable is True


@pytest.mark.unit
def test_reattach_listens_again(gate, notifier, listener, watcher):
    notifier.report(True)
    disconnect = DisconnectListener(gate, notifier)
    disconnect.attach(watcher)
    disconnect.detach()

    disconnect.attach(watcher)
    gate.connected = False
    watcher.emit()

    assert disconnect.detached is False
    assert listener.calls == [True, False]


@pytest.mark.unit
def test_attach_twice_is_rejected(gate, notifier, watcher):
    disconnect = DisconnectListener(gate, notifier)
    disconnect.attach(watcher)

    with pytest.raises(RuntimeError):
        disconnect.attach(watcher)


# =============================================================================
# POLLING WATCHER TESTS
# =============================================================================


@pytest.mark.integration
def test_polling_watcher_reports_flips():
    gate = StaticNetworkGate(connected=True)
    watcher = PollingConnectivityWatcher(gate, poll_interval=0.01)
    changed = threading.Event()

    subscription = watcher.subscribe(changed.set)
    try:
        assert flip_until(gate, changed)
    finally:
        subscription.unsubscribe()


@pytest.mark.integration
def test_polling_watcher_thread_stops_with_last_subscriber():
    watcher = PollingConnectivityWatcher(StaticNetworkGate(), poll_interval=0.01)

    first = watcher.subscribe(lambda: None)
    second = watcher.subscribe(lambda: None)
    thread = watcher._thread
    assert thread is not None and thread.is_alive()

    first.unsubscribe()
    assert watcher._thread is thread

    second.unsubscribe()
    thread.join(timeout=5)
    assert not thread.is_alive()
    assert watcher._thread is None


@pytest.mark.integration
def test_polling_watcher_survives_callback_errors():
    gate = StaticNetworkGate(connected=True)
    watcher = PollingConnectivityWatcher(gate, poll_interval=0.01)
    changed = threading.Event()

    def broken():
        raise RuntimeError("bad subscriber")

    subs = [watcher.subscribe(broken), watcher.subscribe(changed.set)]
    try:
        assert flip_until(gate, changed)
    finally:
        for sub in subs:
            sub.unsubscribe()
