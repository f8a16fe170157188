"""Minimal supervisor for long-running task threads.

Each task is a callable taking the stop event of the current run. It runs
in its own daemon thread; if it returns or raises while the supervisor is still
running, the crash is logged and the task is started again after a short
delay.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import IntEnum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class ServiceState(IntEnum):
    """Lifecycle state of a supervisor or service."""

    STOPPED = auto()
    RUNNING = auto()
    STOPPING = auto()


@dataclass
class SupervisedTask:
    """A task registered with the supervisor.

    Attributes:
        name: Thread name, also used in log messages.
        target: Function run until the stop event is set.
        on_stop: Called after the stop event is set, to wake the target.
        restarts: Number of times the task was restarted.
    """

    name: str
    target: Callable[[threading.Event], None]
    on_stop: Callable[[], None] | None = None
    restarts: int = 0
    thread: threading.Thread | None = field(default=None, repr=False)


class Supervisor:
    """Runs tasks in threads and restarts them when they exit unexpectedly.

    Usage:
        supervisor = Supervisor("FolderSummaryService")
        supervisor.add("listen", classifier.run)
        supervisor.add("calculate", scheduler.run, on_stop=channel.close)
        supervisor.start()
        ...
        supervisor.stop()
    """

    def __init__(self, name: str, restart_delay: float = 1.0) -> None:
        """Initialize the supervisor.

        Args:
            name: Name prefix for task threads.
            restart_delay: Seconds to wait before restarting a task.
        """
        self._name = name
        self._restart_delay = restart_delay
        self._tasks: list[SupervisedTask] = []
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._state = ServiceState.STOPPED

    @property
    def state(self) -> ServiceState:
        """Get current supervisor state."""
        return self._state

    @property
    def tasks(self) -> list[SupervisedTask]:
        """Registered tasks."""
        return list(self._tasks)

    def add(
        self,
        name: str,
        target: Callable[[threading.Event], None],
        on_stop: Callable[[], None] | None = None,
    ) -> SupervisedTask:
        """Register a task. Must be called before start()."""
        task = SupervisedTask(name=name, target=target, on_stop=on_stop)
        self._tasks.append(task)
        return task

    def start(self) -> None:
        """Start all task threads."""
        with self._lock:
            if self._state != ServiceState.STOPPED:
                logger.warning("%s already running", self._name)
                return

            self._state = ServiceState.RUNNING
            # A fresh event per run: a thread that outlived the previous stop()
            # keeps seeing its own event set.
            self._stop_event = threading.Event()
            for task in self._tasks:
                task.thread = threading.Thread(
                    target=self._supervise,
                    args=(task, self._stop_event),
                    name=f"{self._name}/{task.name}",
                    daemon=True,
                )
                task.thread.start()
            logger.info("%s started", self._name)

    def stop(self, timeout: float = 5.0) -> None:
        """Signal all tasks to stop and wait for their threads.

        Args:
            timeout: Maximum time to wait for each thread.
        """
        with self._lock:
            if self._state == ServiceState.STOPPED:
                return
            self._state = ServiceState.STOPPING
            self._stop_event.set()
            logger.info("%s stopping...", self._name)

        for task in self._tasks:
            if task.on_stop is not None:
                task.on_stop()

        for task in self._tasks:
            if task.thread and task.thread.is_alive():
                task.thread.join(timeout=timeout)
                if task.thread.is_alive():
                    logger.warning("Task %s did not stop within %.1fs", task.name, timeout)
            task.thread = None

        with self._lock:
            self._state = ServiceState.STOPPED
            logger.info("%s stopped", self._name)

    def _supervise(self, task: SupervisedTask, stop: threading.Event) -> None:
        while not stop.is_set():
            try:
                task.target(stop)
            except Exception:
                logger.exception("Task %s crashed", task.name)
            if stop.is_set():
                break
            task.restarts += 1
            logger.warning(
                "Task %s exited unexpectedly, restarting in %.1fs",
                task.name,
                self._restart_delay,
            )
            stop.wait(self._restart_delay)
