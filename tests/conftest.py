"""
Test Configuration and Fixtures

Deterministic stand-ins for the threads and clocks the monitor normally
uses, so scheduling can be driven step by step.
"""

from concurrent.futures import Executor, Future
from typing import Callable, List, Optional

import pytest

from hostwatch.reachability import (
    ConnectivityWatcher,
    Monitor,
    MonitorConfig,
    StaticNetworkGate,
    Subscription,
)

# =============================================================================
# CLOCK AND EXECUTORS
# =============================================================================


class FakeTimer:
    def __init__(self, clock: "FakeClock", interval: float, callback: Callable[[], None]):
        self.clock = clock
        self.interval = interval
        self.callback = callback
        self.deadline: Optional[float] = None
        self.cancelled = False
        self.fired = False

    def start(self) -> None:
        self.deadline = self.clock.now + self.interval
        self.clock.timers.append(self)

    def cancel(self) -> None:
        self.cancelled = True


class FakeClock:
    """Timer factory whose timers only fire when advance() is called."""

    def __init__(self):
        self.now = 0.0
        self.timers: List[FakeTimer] = []

    def timer_factory(self, interval: float, callback: Callable[[], None]) -> FakeTimer:
        return FakeTimer(self, interval, callback)

    @property
    def pending(self) -> List[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self.pending if t.deadline <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.deadline)
            self.now = timer.deadline
            timer.fired = True
            timer.callback()
        self.now = target


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def __init__(self):
        self.submitted = 0
        self.shut_down = False

    def submit(self, fn, *args, **kwargs) -> Future:
        self.submitted += 1
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait=True, **kwargs) -> None:
        self.shut_down = True


class ManualExecutor(Executor):
    """Holds submitted work until run_next() is called."""

    def __init__(self):
        self.queue: List[tuple] = []
        self.shut_down = False

    def submit(self, fn, *args, **kwargs) -> Future:
        future: Future = Future()
        self.queue.append((future, fn, args, kwargs))
        return future

    def run_next(self) -> None:
        future, fn, args, kwargs = self.queue.pop(0)
        future.set_result(fn(*args, **kwargs))

    def shutdown(self, wait=True, **kwargs) -> None:
        self.shut_down = True


# =============================================================================
# LISTENERS, CHECKS AND WATCHERS
# =============================================================================


class RecordingListener:
    """Listener that remembers every value it was called with."""

    def __init__(self):
        self.calls: List[bool] = []

    def __call__(self, reachable: bool) -> None:
        self.calls.append(reachable)


class ScriptedCheck:
    """Custom check returning a fixed sequence, repeating the last value."""

    def __init__(self, *results: bool):
        self.results = list(results)
        self.calls: List[tuple] = []

    def __call__(self, context, host) -> bool:
        self.calls.append((context, host))
        if len(self.results) > 1:
            return self.results.pop(0)
        return self.results[0]


class FakeWatcher(ConnectivityWatcher):
    """Connectivity watcher driven by emit()."""

    def __init__(self):
        self.callbacks: List[Callable[[], None]] = []

    def subscribe(self, callback: Callable[[], None]) -> Subscription:
        self.callbacks.append(callback)
        return Subscription(lambda: self.callbacks.remove(callback))

    def emit(self) -> None:
        for callback in list(self.callbacks):
            callback()


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gate():
    return StaticNetworkGate(connected=True)


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def watcher():
    return FakeWatcher()


@pytest.fixture
def monitor(clock, gate, watcher):
    """
    Provide a Monitor running probes inline and timers on the fake clock.

    Usage:
        def test_monitor(monitor, clock, listener):
            monitor.start_monitoring_check(ScriptedCheck(True), listener)
            clock.advance(2)
    """
    monitor = Monitor(
        config=MonitorConfig(check_timeout=1, recheck_interval=2),
        gate=gate,
        watcher=watcher,
        executor_factory=InlineExecutor,
        timer_factory=clock.timer_factory,
    )
    yield monitor
    monitor.stop()


def pytest_configure(config):
    """
    Configure pytest with custom markers.
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Tests using real threads or sockets")
