import logging

import pytest

from tickcron.cron.clock import reset_clock


@pytest.fixture(autouse=True)
def _isolate_globals():
    """Restore the global clock and the tickcron logger after each test."""
    yield
    reset_clock()
    logger = logging.getLogger("tickcron")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
