import logging
from celery import shared_task

from app.utils import transactional

logger = logging.getLogger(__name__)


def _expire_overdue():
    from app.services.reconciliation import expire_stale_sessions

    with transactional("Failed to reconcile payment sessions"):
        return expire_stale_sessions()


@shared_task(bind=True, max_retries=2, default_retry_delay=30)
def reconcile_payment_sessions_task(self) -> int:
    """Expire overdue UPI payment sessions."""
    from flask import has_app_context

    if has_app_context():
        expired = _expire_overdue()
    else:
        from app import create_app
        with create_app().app_context():
            expired = _expire_overdue()
    logger.info("Reconciliation expired %s payment sessions", expired)
    return expired
