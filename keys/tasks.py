"""
Celery tasks for the key lifecycle.

The janitor sweep runs on the beat schedule and once when a worker starts.
"""
import asyncio
import logging

from celery.signals import worker_ready

from DeviceKeyService.celery import app
from core.metrics import janitor_sweeps_total, keys_expired_total

logger = logging.getLogger(__name__)


def run_sweep() -> int:
    """Run one janitor sweep against the Django key store."""
    from keys.domain.services import KeyJanitor
    from keys.infrastructure.repositories.django_key_repository import (
        DjangoKeyRepository,
    )

    janitor = KeyJanitor(DjangoKeyRepository())
    return asyncio.run(janitor.sweep())


@app.task(bind=True, max_retries=0)
def sweep_expired_keys_task(self):
    """
    Mark every active key past its expiry time as expired.

    A failed sweep is logged and left for the next scheduled run.

    Returns:
        Number of keys transitioned
    """
    try:
        expired = run_sweep()
    except Exception as exc:  # pylint: disable=broad-exception-caught
        janitor_sweeps_total.labels(result="failure").inc()
        logger.error("Key sweep failed: %s", exc, exc_info=True)
        return 0

    janitor_sweeps_total.labels(result="success").inc()
    keys_expired_total.inc(expired)
    logger.info(
        "Key sweep finished",
        extra={"expired_count": expired, "task_id": self.request.id},
    )
    return expired


@worker_ready.connect
def sweep_on_worker_ready(sender=None, **kwargs):
    """Queue one sweep as soon as a worker is ready."""
    logger.info("Worker ready, queueing initial key sweep")
    sweep_expired_keys_task.delay()
