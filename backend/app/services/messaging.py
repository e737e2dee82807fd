"""
User <-> admin message log shared by the messages API, the chat stream and
the assistant.
"""
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload
from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.models.message import Message
from app.models.user import User
from app.schemas import Identity, MessageResponse


def first_admin(db: Session) -> Optional[User]:
    return db.query(User).filter(User.is_admin == True).order_by(User.id).first()


def message_out(message: Message) -> dict:
    return MessageResponse.model_validate(message).model_dump(by_alias=True, mode="json")


def visible_messages(db: Session, identity: Identity):
    """Admins see every message, users see what they sent or received."""
    query = db.query(Message).options(
        joinedload(Message.sender),
        joinedload(Message.receiver)
    )
    if not identity.is_admin:
        query = query.filter(or_(Message.sender_id == identity.id, Message.receiver_id == identity.id))
    return query


def list_messages(db: Session, identity: Identity) -> List[Message]:
    return visible_messages(db, identity).order_by(Message.created_at.asc(), Message.id.asc()).all()


def fetch_new_messages(db: Session, identity: Identity, after_id: int, limit: int) -> List[Message]:
    """Messages newer than ``after_id`` in id order, at most ``limit`` of them."""
    return visible_messages(db, identity).filter(
        Message.id > after_id
    ).order_by(Message.id.asc()).limit(limit).all()


def resolve_receiver(db: Session, identity: Identity, receiver_id: Optional[int]) -> User:
    """
    Pick who a message goes to. Users may only write to an admin and default
    to the first admin; admins must name the receiver.
    """
    if receiver_id is None:
        if identity.is_admin:
            raise ValidationError("Receiver is required")
        admin = first_admin(db)
        if not admin:
            raise NotFound("No administrator found")
        return admin

    receiver = db.query(User).filter(User.id == receiver_id).first()
    if not receiver:
        raise NotFound("Receiver not found")
    if not identity.is_admin and not receiver.is_admin:
        raise Forbidden("Messages can only be sent to an administrator")
    return receiver


def send_message(db: Session, sender_id: int, receiver_id: int, content: str) -> Message:
    message = Message(
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=content,
        is_read=False
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message
