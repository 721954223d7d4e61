import logging
from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def notify_room_funded_task(self, room_id: int) -> None:
    """Log instead of messaging room members; delivery is an external service."""
    logger.info("[notify disabled] room %s fully funded, ready to order", room_id)


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def notify_order_placed_task(self, order_id: int) -> None:
    logger.info("[notify disabled] group order %s placed", order_id)


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def notify_late_payment_task(self, reference_id: str, outcome: str) -> None:
    logger.info("[notify disabled] late payment %s handled: %s", reference_id, outcome)
