from celery import Celery

from millionaire.core.config import get_settings
from millionaire.core.logging import configure_logging

settings = get_settings()
configure_logging(settings.log_level, json_output=settings.app_env != "dev")

celery_app = Celery(
    "millionaire",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "millionaire.workers.tasks.game_timeouts",
    ],
)

celery_app.conf.update(
    task_default_queue="q_normal",
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
)

