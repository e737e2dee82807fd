from app.core.celery_app import celery_app
from app.db.session import SessionLocal
from app.services.auth import AuthService
import logging

logger = logging.getLogger(__name__)


@celery_app.task
def clean_expired_sessions_task():
    """Purge expired session rows. Expired tokens are already rejected, this only frees storage."""
    db = SessionLocal()
    try:
        return AuthService(db).clean_expired_sessions()
    except Exception as e:
        db.rollback()
        logger.error(f"Error cleaning expired sessions: {e}")
        raise
    finally:
        db.close()
