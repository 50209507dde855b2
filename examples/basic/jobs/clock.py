"""
Example jobs: print the time every minute, plus an async report job.

Run with:  tickcron run -d examples/basic
"""

import asyncio
from datetime import datetime, timezone

from tickcron import get_logger, job

logger = get_logger("tickcron.examples.clock")


@job("* * * * *")
def announce_time():
    """Print the current time."""
    print(f"The time is currently: {datetime.now(timezone.utc).isoformat(timespec='seconds')}")


@job("0 9 * * 1-5")
async def weekday_report():
    """Pretend to build a report (schedule overridden in config.yaml)."""
    await asyncio.sleep(1)
    logger.info("Weekday report done")
