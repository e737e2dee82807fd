from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.security import hash_password
from app.models.user import User
import logging

logger = logging.getLogger(__name__)


def init_db(db: Session) -> User:
    """Make sure an administrator exists, creating the bootstrap admin if needed."""
    admin = db.query(User).filter(User.is_admin == True).first()
    if admin:
        return admin

    admin = User(
        name=settings.ADMIN_USER,
        password=hash_password(settings.ADMIN_PASS),
        allowed_devices=settings.ADMIN_DEVICES,
        is_admin=True,
        is_suspended=False
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(f"Bootstrap administrator '{admin.name}' created")
    return admin
