from typing import Any, Optional
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from app.api import deps
from app.core.config import settings
from app.core.security import token_lifetime
from app.schemas import Identity, LoginRequest
from app.services.auth import AuthService

router = APIRouter()


@router.post("/auth/login")
def login(
    credentials: LoginRequest,
    response: Response,
    db: Session = Depends(deps.get_db)
) -> Any:
    """Log in with a password and receive the session token (also set as cookie)."""
    identity, token = AuthService(db).authenticate(credentials.password, credentials.device_id)

    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=int(token_lifetime().total_seconds()),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
    )
    return {
        "success": True,
        "user": identity.model_dump(by_alias=True),
        "token": token
    }


@router.post("/auth/logout")
def logout(
    response: Response,
    db: Session = Depends(deps.get_db),
    token: Optional[str] = Depends(deps.get_token)
) -> Any:
    """Revoke the presented token and clear the cookie."""
    if token:
        AuthService(db).logout(token)
    response.delete_cookie(settings.AUTH_COOKIE_NAME, path="/")
    return {"success": True}


@router.get("/auth/me")
def read_current_user(current_user: Identity = Depends(deps.get_current_user)) -> Any:
    return {"success": True, "user": current_user.model_dump(by_alias=True)}
