from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.api import deps
from app.schemas import Identity, MessageCreate
from app.services import messaging

router = APIRouter()


@router.get("")
def list_messages(
    db: Session = Depends(deps.get_db),
    current_user: Identity = Depends(deps.get_current_user)
) -> Any:
    """Admins get the whole log, users their own conversation, oldest first."""
    messages = messaging.list_messages(db, current_user)
    return {"success": True, "messages": [messaging.message_out(m) for m in messages]}


@router.post("")
def send_message(
    message_in: MessageCreate,
    db: Session = Depends(deps.get_db),
    current_user: Identity = Depends(deps.get_current_user)
) -> Any:
    receiver = messaging.resolve_receiver(db, current_user, message_in.receiver_id)
    message = messaging.send_message(db, current_user.id, receiver.id, message_in.content.strip())
    return {"success": True, "message": messaging.message_out(message)}
