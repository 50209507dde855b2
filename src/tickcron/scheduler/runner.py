"""
Minute-aligned task runner.

Wakes at the top of every minute, asks each task's schedule whether that
minute is due, and launches the due callbacks.

Policies:
- No overlap: a task whose previous run is still in flight is skipped for
  that minute (logged at WARNING).
- Errors: a failing callback is logged. With ``stop_on_error`` (default) the
  scheduler then stops and ``run()`` raises ``TaskExecutionError``; otherwise
  it keeps ticking.
- Shutdown: SIGINT/SIGTERM or ``stop()`` end the tick loop. Callbacks already
  running are awaited, never cancelled.
"""

from __future__ import annotations

import asyncio
import signal
from datetime import datetime, timedelta
from typing import Any

from tickcron.cron import clock
from tickcron.exceptions import JobDefinitionError, TaskExecutionError
from tickcron.scheduler.task import Task
from tickcron.utils.logging import get_logger

logger = get_logger("tickcron.scheduler")

_SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def _next_minute(instant: datetime) -> datetime:
    return instant.replace(second=0, microsecond=0) + timedelta(minutes=1)


class Scheduler:
    """Runs a set of tasks on their cron schedules."""

    def __init__(self, *, stop_on_error: bool = True, install_signal_handlers: bool = True) -> None:
        self.tasks: list[Task] = []
        self.stop_on_error = stop_on_error
        self.install_signal_handlers = install_signal_handlers

        self._running = False
        self._stop_requested = False
        # Created per run(): an asyncio.Event binds to the loop that first waits on it
        self._stopping: asyncio.Event | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._in_flight: dict[str, asyncio.Task] = {}
        self._failure: TaskExecutionError | None = None

    def add_tasks(self, *tasks: Task) -> Scheduler:
        """Register tasks; returns self for chaining."""
        known = {t.name for t in self.tasks}
        for task in tasks:
            if task.name in known:
                raise JobDefinitionError(f"Duplicate task name: {task.name}", details={"task": task.name})
            known.add(task.name)
            self.tasks.append(task)
        return self

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """
        Ask the tick loop to finish. Safe to call from any thread.

        A stop requested while no run is active is kept: the next ``run()``
        returns right away without ticking.
        """
        self._stop_requested = True
        loop, stopping = self._loop, self._stopping
        if loop is None or stopping is None:
            return
        try:
            current = asyncio.get_running_loop()
        except RuntimeError:
            current = None
        if current is loop:
            stopping.set()
        elif loop.is_running():
            loop.call_soon_threadsafe(stopping.set)

    async def run(self) -> None:
        """
        Tick until stopped. May be called again after it returns, also from a
        different event loop.

        Raises:
            TaskExecutionError: If a callback failed and ``stop_on_error`` is set
        """
        loop = asyncio.get_running_loop()
        stopping = asyncio.Event()
        self._loop = loop
        self._stopping = stopping
        if self._stop_requested:
            stopping.set()
        self._failure = None
        self._running = True

        installed = self._install_signal_handlers() if self.install_signal_handlers else []
        logger.info(f"Scheduler started with {len(self.tasks)} task(s)")
        try:
            while not stopping.is_set():
                now = clock.now()
                target = _next_minute(now)
                try:
                    await asyncio.wait_for(stopping.wait(), timeout=(target - now).total_seconds())
                except asyncio.TimeoutError:
                    pass
                if stopping.is_set():
                    break
                await self.tick(target)
        finally:
            self._running = False
            for sig in installed:
                loop.remove_signal_handler(sig)
            if self._in_flight:
                logger.info(f"Waiting for {len(self._in_flight)} running task(s) to finish")
                await asyncio.gather(*self._in_flight.values(), return_exceptions=True)
            # Stops that ended this run must not end the next one
            self._stop_requested = False
            self._stopping = None
            self._loop = None
            logger.info("Scheduler stopped")

        if self._failure is not None:
            raise self._failure

    async def tick(self, at: datetime | None = None) -> list[str]:
        """
        Launch every task due at ``at`` (default: the current minute).

        Returns:
            Names of the tasks launched
        """
        launched: list[str] = []
        for task in self.tasks:
            due = task.cron.is_due_now() if at is None else task.cron.matches(at)
            if not due:
                continue
            if task.name in self._in_flight:
                task.skipped_count += 1
                logger.warning(f"Task '{task.name}' is still running, skipping this run")
                continue
            self._in_flight[task.name] = asyncio.create_task(self._invoke(task), name=f"tickcron:{task.name}")
            launched.append(task.name)
        return launched

    async def wait_idle(self) -> None:
        """Wait for every in-flight callback to finish."""
        while self._in_flight:
            await asyncio.gather(*self._in_flight.values(), return_exceptions=True)

    async def _invoke(self, task: Task) -> None:
        started = clock.now()
        logger.info(f"Running task '{task.name}'")
        try:
            await task.invoke()
        except Exception as e:
            task.last_error = str(e)
            logger.error(f"Task '{task.name}' failed: {e}", exc_info=True)
            if self.stop_on_error:
                if self._failure is None:
                    self._failure = TaskExecutionError(task.name, cause=e)
                self.stop()
        else:
            task.last_error = None
            logger.debug(f"Task '{task.name}' finished")
        finally:
            task.last_run_at = started
            task.run_count += 1
            self._in_flight.pop(task.name, None)

    def _install_signal_handlers(self) -> list[signal.Signals]:
        assert self._loop is not None
        installed: list[signal.Signals] = []
        for sig in _SHUTDOWN_SIGNALS:
            try:
                self._loop.add_signal_handler(sig, self._handle_signal, sig)
            except (NotImplementedError, RuntimeError, ValueError) as e:
                # Windows event loops and non-main threads cannot install handlers
                logger.debug(f"Could not install handler for {sig.name}: {e}")
                continue
            installed.append(sig)
        return installed

    def _handle_signal(self, sig: signal.Signals) -> None:
        logger.info(f"Received signal: {sig.name}, shutting down")
        self.stop()

    def get_status(self) -> dict[str, Any]:
        """Return scheduler status for CLI / logging observability."""
        return {
            "running": self._running,
            "task_count": len(self.tasks),
            "tasks": [{**task.status(), "in_flight": task.name in self._in_flight} for task in self.tasks],
        }
