from __future__ import annotations

from datetime import datetime, timezone
from time import perf_counter

import structlog

from millionaire.core.config import get_settings
from millionaire.db.session import SessionLocal
from millionaire.game.sessions.service import GameService
from millionaire.workers.asyncio_runner import run_async_job
from millionaire.workers.celery_app import celery_app

logger = structlog.get_logger(__name__)


def _clamp_batch_size(value: int) -> int:
    return max(1, min(10000, int(value)))


def _clamp_scan_interval_seconds(value: int) -> int:
    return max(10, min(3600, int(value)))


async def run_game_timeouts_async(
    *,
    now_utc: datetime | None = None,
    batch_size: int | None = None,
) -> dict[str, int]:
    effective_now = now_utc or datetime.now(timezone.utc)
    effective_batch = _clamp_batch_size(
        batch_size if batch_size is not None else get_settings().game_timeout_scan_batch_size
    )
    started_at = perf_counter()

    async with SessionLocal.begin() as session:
        expired_games = await GameService.expire_timed_out_games(
            session,
            now_utc=effective_now,
            limit=effective_batch,
        )

    result = {
        "expired_games": expired_games,
        "batch_size": effective_batch,
        "duration_ms": int((perf_counter() - started_at) * 1000),
    }
    logger.info("game_timeouts_sweep_finished", **result)
    return result


@celery_app.task(name="millionaire.workers.tasks.game_timeouts.run_game_timeouts")
def run_game_timeouts() -> dict[str, int]:
    return run_async_job(run_game_timeouts_async(), job_name="game_timeouts")


celery_app.conf.beat_schedule = celery_app.conf.beat_schedule or {}
celery_app.conf.beat_schedule.update(
    {
        "game-timeouts-sweep": {
            "task": "millionaire.workers.tasks.game_timeouts.run_game_timeouts",
            "schedule": float(
                _clamp_scan_interval_seconds(get_settings().game_timeout_scan_interval_seconds)
            ),
            "options": {"queue": "q_normal"},
        },
    }
)
