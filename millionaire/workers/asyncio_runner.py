from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from time import perf_counter
from typing import TypeVar

import structlog

from millionaire.db.session import dispose_engine

T = TypeVar("T")

logger = structlog.get_logger(__name__)


async def _run_with_fresh_db_pool(awaitable: Awaitable[T], *, job_name: str) -> T:
    # asyncpg connections are bound to the loop that opened them.
    await dispose_engine()
    started_at = perf_counter()
    with structlog.contextvars.bound_contextvars(job=job_name):
        try:
            return await awaitable
        except Exception:
            logger.exception(
                "worker_job_failed",
                duration_ms=int((perf_counter() - started_at) * 1000),
            )
            raise
        finally:
            await dispose_engine()


def run_async_job(awaitable: Awaitable[T], *, job_name: str) -> T:
    return asyncio.run(_run_with_fresh_db_pool(awaitable, job_name=job_name))
