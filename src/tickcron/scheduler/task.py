"""
Scheduled task: a cron schedule bound to a callback.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from tickcron.cron.schedule import Cron


@dataclass
class Task:
    """
    A callback run whenever its cron schedule is due.

    ``fn`` takes no arguments and may be a plain function or a coroutine
    function. Plain functions run in a worker thread so a slow job does not
    stall the tick loop.
    """

    name: str
    cron: Cron
    fn: Callable[[], Any]

    # Runtime state, maintained by the Scheduler
    last_run_at: datetime | None = field(default=None, init=False)
    last_error: str | None = field(default=None, init=False)
    run_count: int = field(default=0, init=False)
    skipped_count: int = field(default=0, init=False)

    async def invoke(self) -> None:
        """Run the callback once."""
        if inspect.iscoroutinefunction(self.fn):
            await self.fn()
            return
        result = await asyncio.to_thread(self.fn)
        if inspect.isawaitable(result):
            await result

    def status(self) -> dict[str, Any]:
        return {
            "task": self.name,
            "schedule": self.cron.expression,
            "timezone": "utc" if self.cron.is_utc else "local",
            "next_fire_at": self.cron.next().isoformat(),
            "last_run_at": self.last_run_at.isoformat() if self.last_run_at else None,
            "last_error": self.last_error,
            "run_count": self.run_count,
            "skipped_count": self.skipped_count,
        }
