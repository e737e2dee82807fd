"""
Request dependencies: database session and the authorization gate.

``get_current_user`` performs the full token check (signature, live session,
suspension) on every protected route; ``get_current_admin`` adds the admin
check on top of it. Handlers receive the resolved ``Identity`` and never
look at the raw token.
"""
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import Forbidden, Unauthenticated
from app.db.session import get_db, get_session_factory  # noqa: F401
from app.schemas import Identity
from app.services.auth import AuthService


def get_token(request: Request) -> Optional[str]:
    """Token from the auth cookie, falling back to an Authorization bearer header."""
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(get_token)
) -> Identity:
    if not token:
        raise Unauthenticated()

    identity = AuthService(db).verify_token(token)
    if identity is None:
        raise Unauthenticated()

    request.state.identity = identity
    return identity


def get_current_admin(current_user: Identity = Depends(get_current_user)) -> Identity:
    if not current_user.is_admin:
        raise Forbidden()
    return current_user
