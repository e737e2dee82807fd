"""
Authentication service: password login, token verification and session housekeeping
"""
import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from app.core import security
from app.core.exceptions import DeviceLimitExceeded, InvalidCredentials
from app.models.session import UserSession
from app.models.user import User
from app.schemas import Identity

logger = logging.getLogger(__name__)


def to_identity(user: User) -> Identity:
    return Identity(
        id=user.id,
        name=user.name,
        is_admin=user.is_admin,
        allowed_devices=user.allowed_devices,
    )


class AuthService:
    """Authentication operations bound to one database session"""

    def __init__(self, db: Session):
        self.db = db

    def find_user_by_password(self, password: str) -> Optional[User]:
        """
        Scan every non-suspended user and return the first whose hash matches.

        There is no username on the login form, so the password alone
        identifies the account.
        """
        users = self.db.query(User).filter(User.is_suspended == False).order_by(User.id).all()
        for user in users:
            if security.verify_password(password, user.password):
                return user
        return None

    def count_active_sessions(self, user_id: int) -> int:
        return self.db.query(UserSession).filter(
            UserSession.user_id == user_id,
            UserSession.expires_at > security.utcnow()
        ).count()

    def authenticate(self, password: str, device_id: Optional[str] = None) -> Tuple[Identity, str]:
        """
        Log a user in and persist a session for the issued token.

        Returns:
            The identity of the matched user and the signed token

        Raises:
            InvalidCredentials: no active user has this password
            DeviceLimitExceeded: a device id was given and the user already
                holds ``allowed_devices`` unexpired sessions
        """
        user = self.find_user_by_password(password)
        if not user:
            logger.info("Login rejected: no matching password")
            raise InvalidCredentials()

        if device_id:
            active = self.count_active_sessions(user.id)
            if active >= user.allowed_devices:
                logger.info(f"Login rejected for user {user.id}: {active}/{user.allowed_devices} devices in use")
                raise DeviceLimitExceeded()

        token, expires_at = security.create_access_token(user.id, user.is_admin, user.name)
        self.db.add(UserSession(
            user_id=user.id,
            token=token,
            device_id=device_id or None,
            expires_at=expires_at
        ))
        self.db.commit()

        logger.info(f"User {user.id} logged in (device={device_id or '-'})")
        return to_identity(user), token

    def verify_token(self, token: str) -> Optional[Identity]:
        """
        Resolve a token to an identity.

        The signature and expiry are checked first; only then must a live
        session row with this exact token exist and its owner must not be
        suspended. Any failed step returns None.
        """
        if not token or security.decode_access_token(token) is None:
            return None

        session = self.db.query(UserSession).filter(
            UserSession.token == token,
            UserSession.expires_at > security.utcnow()
        ).first()
        if not session:
            return None

        user = self.db.query(User).filter(User.id == session.user_id).first()
        if not user or user.is_suspended:
            return None

        return to_identity(user)

    def logout(self, token: str) -> int:
        """Delete every session holding this token. Deleting nothing is fine."""
        deleted = self.db.query(UserSession).filter(
            UserSession.token == token
        ).delete(synchronize_session=False)
        self.db.commit()
        logger.info(f"Logout removed {deleted} session(s)")
        return deleted

    def clean_expired_sessions(self) -> int:
        """Remove expired sessions from database"""
        deleted = self.db.query(UserSession).filter(
            UserSession.expires_at < security.utcnow()
        ).delete(synchronize_session=False)
        self.db.commit()
        if deleted:
            logger.info(f"Purged {deleted} expired session(s)")
        return deleted
