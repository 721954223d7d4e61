from contextlib import contextmanager
import logging
from models import db
from app.services.errors import CheckoutError

@contextmanager
def transactional(message="DB transaction failed"):
    """Commit on success, roll back on any error and re-raise it.

    Expected domain errors are logged at info level; anything else is
    logged with its stack trace.
    """
    try:
        yield
        db.session.commit()
    except CheckoutError as e:
        logging.info(f"{message}: %s", e)
        db.session.rollback()
        raise
    except Exception as e:
        logging.error(f"{message}: %s", e, exc_info=True)
        db.session.rollback()
        raise
