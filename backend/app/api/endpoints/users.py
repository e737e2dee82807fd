from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.api import deps
from app.core.exceptions import NotFound, ValidationError
from app.core.security import hash_password
from app.models.user import User
from app.schemas import Identity, UserCreate, UserUpdate, UserResponse
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def _user_out(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(by_alias=True)


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


@router.get("")
def list_users(
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    """List all users, newest first. Password hashes are never returned."""
    users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    return {"success": True, "users": [_user_out(u) for u in users]}


@router.get("/{user_id}")
def get_user(
    user_id: int,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    return {"success": True, "user": _user_out(_get_user_or_404(db, user_id))}


@router.post("")
def create_user(
    user_in: UserCreate,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    user = User(
        name=user_in.name.strip(),
        password=hash_password(user_in.password),
        allowed_devices=user_in.allowed_devices,
        is_admin=user_in.is_admin,
        is_suspended=False
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Admin {admin.id} created user {user.id}")
    return {"success": True, "user": _user_out(user)}


@router.put("/{user_id}")
def update_user(
    user_id: int,
    user_in: UserUpdate,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    """Update a user. The password is only re-hashed when a non-blank one is sent."""
    user = _get_user_or_404(db, user_id)

    update_data = user_in.model_dump(exclude_unset=True)
    password = update_data.pop("password", None)
    if "name" in update_data and not (update_data["name"] or "").strip():
        raise ValidationError("Name must not be blank")

    for field, value in update_data.items():
        if value is not None:
            setattr(user, field, value)
    if password and password.strip():
        user.password = hash_password(password)

    db.commit()
    db.refresh(user)
    logger.info(f"Admin {admin.id} updated user {user.id}")
    return {"success": True, "user": _user_out(user)}


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    if user_id == admin.id:
        raise ValidationError("You cannot delete your own account")

    user = _get_user_or_404(db, user_id)
    db.delete(user)
    db.commit()
    logger.info(f"Admin {admin.id} deleted user {user_id}")
    return {"success": True, "message": "User deleted"}
