from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.api import deps
from app.core.exceptions import NotFound
from app.models.channel import Channel
from app.schemas import Identity, ChannelCreate, ChannelUpdate, ChannelResponse

router = APIRouter()


def _channel_out(channel: Channel) -> dict:
    return ChannelResponse.model_validate(channel).model_dump(by_alias=True)


def _get_channel_or_404(db: Session, channel_id: int) -> Channel:
    channel = db.query(Channel).filter(Channel.id == channel_id).first()
    if not channel:
        raise NotFound("Channel not found")
    return channel


@router.get("")
def list_channels(
    db: Session = Depends(deps.get_db),
    current_user: Identity = Depends(deps.get_current_user)
) -> Any:
    channels = db.query(Channel).order_by(Channel.name.asc()).all()
    return {"success": True, "channels": [_channel_out(c) for c in channels]}


@router.get("/{channel_id}")
def get_channel(
    channel_id: int,
    db: Session = Depends(deps.get_db),
    current_user: Identity = Depends(deps.get_current_user)
) -> Any:
    return {"success": True, "channel": _channel_out(_get_channel_or_404(db, channel_id))}


@router.post("")
def create_channel(
    channel_in: ChannelCreate,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    channel = Channel(**channel_in.model_dump())
    db.add(channel)
    db.commit()
    db.refresh(channel)
    return {"success": True, "channel": _channel_out(channel)}


@router.put("/{channel_id}")
def update_channel(
    channel_id: int,
    channel_in: ChannelUpdate,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    channel = _get_channel_or_404(db, channel_id)

    update_data = channel_in.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(channel, field, value)

    db.commit()
    db.refresh(channel)
    return {"success": True, "channel": _channel_out(channel)}


@router.delete("/{channel_id}")
def delete_channel(
    channel_id: int,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    channel = _get_channel_or_404(db, channel_id)
    db.delete(channel)
    db.commit()
    return {"success": True, "message": "Channel deleted"}
