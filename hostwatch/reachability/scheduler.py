"""Periodic re-check scheduling."""

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from enum import Enum
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    """Scheduler lifecycle states."""
    IDLE = "idle"
    RUNNING = "running"


class SchedulerError(RuntimeError):
    """Raised when the scheduler is started twice."""


class TimerHandle(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def default_timer_factory(interval: float, callback: Callable[[], None]) -> TimerHandle:
    timer = threading.Timer(interval, callback)
    timer.daemon = True
    timer.name = "reachability-recheck"
    return timer


def default_executor_factory() -> Executor:
    return ThreadPoolExecutor(max_workers=1, thread_name_prefix="reachability-probe")


class Scheduler:
    """Runs a check on a worker thread, then again every recheck interval.

    The next check is armed only after the previous one completes, so at
    most one scheduled check is in flight. Each start() begins a new run;
    completions belonging to an earlier run are dropped, which keeps a
    late result from resurrecting a stopped loop.
    """

    def __init__(
        self,
        executor_factory: Optional[Callable[[], Executor]] = None,
        timer_factory: Optional[TimerFactory] = None,
    ):
        self._executor_factory = executor_factory or default_executor_factory
        self._timer_factory = timer_factory or default_timer_factory

        self._lock = threading.Lock()
        self._state = SchedulerState.IDLE
        self._run_id = 0
        self._executor: Optional[Executor] = None
        self._timer: Optional[TimerHandle] = None

        self._task: Optional[Callable[[], bool]] = None
        self._on_result: Optional[Callable[[bool], None]] = None
        self._recheck_interval = 0.0

    @property
    def state(self) -> SchedulerState:
        with self._lock:
            return self._state

    @property
    def is_running(self) -> bool:
        return self.state is SchedulerState.RUNNING

    def start(
        self,
        task: Callable[[], bool],
        recheck_interval: float,
        on_result: Callable[[bool], None],
    ) -> None:
        """Start checking; the first check is dispatched immediately.

        Args:
            task: Blocking check returning the reachability.
            recheck_interval: Seconds between a result and the next check.
            on_result: Receives every result, on the worker thread.

        Raises:
            SchedulerError: If already running.
        """
        with self._lock:
            if self._state is SchedulerState.RUNNING:
                raise SchedulerError("Scheduler is already running")

            self._executor = self._executor_factory()
            self._state = SchedulerState.RUNNING
            self._run_id += 1
            run_id = self._run_id
            self._task = task
            self._on_result = on_result
            self._recheck_interval = recheck_interval

        logger.debug(f"Scheduler started (interval={recheck_interval}s)")
        self._dispatch(run_id)

    def stop(self) -> None:
        """Stop checking. Safe to call when idle and more than once.

        A check already running is left to finish; its result is dropped.
        """
        with self._lock:
            if self._state is SchedulerState.IDLE:
                return

            self._state = SchedulerState.IDLE
            timer, self._timer = self._timer, None
            executor, self._executor = self._executor, None

        if timer is not None:
            timer.cancel()
        if executor is not None:
            executor.shutdown(wait=False)
        logger.debug("Scheduler stopped")

    def _is_current(self, run_id: int) -> bool:
        return self._state is SchedulerState.RUNNING and run_id == self._run_id

    def _dispatch(self, run_id: int) -> None:
        with self._lock:
            if not self._is_current(run_id):
                return
            self._timer = None
            future = self._executor.submit(self._task)

        future.add_done_callback(lambda f: self._on_done(run_id, f))

    def _on_done(self, run_id: int, future: Future) -> None:
        if future.cancelled():
            return
        try:
            result = bool(future.result())
        except Exception:
            logger.exception("Reachability check raised, treating as unreachable")
            result = False

        with self._lock:
            if not self._is_current(run_id):
                logger.debug("Dropping result of a stopped run")
                return
            on_result = self._on_result

        try:
            on_result(result)
        except Exception:
            logger.exception("Result handler raised")

        with self._lock:
            if not self._is_current(run_id):
                return
            self._timer = self._timer_factory(
                self._recheck_interval,
                lambda: self._dispatch(run_id),
            )
            self._timer.start()
