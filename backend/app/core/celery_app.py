from celery import Celery
from app.core.config import settings

celery_app = Celery("worker", broker=settings.REDIS_URL, backend=settings.REDIS_URL)

celery_app.conf.update(task_track_started=True)

# Configure Celery Beat schedule
celery_app.conf.beat_schedule = {
    'clean-expired-sessions': {
        'task': 'app.tasks.sessions.clean_expired_sessions_task',
        'schedule': settings.SESSION_CLEANUP_INTERVAL_SECONDS,
    },
}
celery_app.conf.timezone = settings.TIMEZONE

# Import tasks to register them
from app.tasks import sessions  # noqa
