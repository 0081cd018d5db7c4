"""
Startup Probe — fail-fast gate
==============================

Runs exactly once during process initialization: check out one connection
from the pool, log success and give it back. If that fails the process must not
start serving traffic, so the gate logs the failure and exits with status 1.

This is not a health-check loop; nothing here retries.
"""

import logging

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.engine import Engine

logger = logging.getLogger("uvicorn.error")

STARTUP_FAILURE_EXIT_CODE = 1


def _checkout_and_release(engine: Engine) -> None:
    with engine.connect():
        pass


async def probe_connection(engine: Engine) -> None:
    """
    Acquire one pooled connection and release it.

    The blocking DBAPI connect runs in the threadpool so the event loop stays free.

    Raises
    ------
    Exception
        Whatever the driver or SQLAlchemy raised while connecting.
    """
    await run_in_threadpool(_checkout_and_release, engine)
    logger.info("✅ Database connection successful")


async def run_startup_gate(engine: Engine) -> None:
    """
    Probe the database once and terminate the process if it is unreachable.

    Raises
    ------
    SystemExit
        With code 1 when the probe fails.
    """
    try:
        await probe_connection(engine)
    except Exception as e:
        logger.error("❌ Database connection failed: %s", e)
        logger.error("Full error: %r", e, exc_info=e)
        raise SystemExit(STARTUP_FAILURE_EXIT_CODE) from e
