import asyncio
import json
from typing import Any, AsyncIterator, Callable, Optional
import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from app.api import deps
from app.core.config import settings
from app.core.exceptions import AssistantError
from app.schemas import BotRequest, Identity
from app.services import messaging
from app.services.assistant import AssistantClient, build_prompt, get_assistant_client
from app.services.auth import AuthService
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

BOT_PREFIX = "🤖 "


def _poll_messages(session_factory: Callable[[], Session], token: str, after_id: int) -> Optional[list]:
    """New messages for the token's owner, or None once the session is no longer valid."""
    db = session_factory()
    try:
        identity = AuthService(db).verify_token(token)
        if identity is None:
            return None
        messages = messaging.fetch_new_messages(db, identity, after_id, settings.CHAT_POLL_BATCH)
        return [messaging.message_out(m) for m in messages]
    finally:
        db.close()


async def message_events(
    request: Request,
    token: str,
    identity: Identity,
    session_factory: Callable[[], Session],
    interval: float = None
) -> AsyncIterator[str]:
    """
    Server-sent events for new messages. The store is re-queried on a fixed
    interval until the client disconnects or its token stops verifying.
    """
    interval = settings.CHAT_POLL_INTERVAL_SECONDS if interval is None else interval
    last_id = 0
    while not await request.is_disconnected():
        try:
            batch = await run_in_threadpool(_poll_messages, session_factory, token, last_id)
        except SQLAlchemyError as e:
            # Keep the stream open, the next poll may succeed
            logger.error(f"Chat poll failed for user {identity.id}: {e}")
            batch = []

        if batch is None:
            logger.info(f"Chat stream closed for user {identity.id}: session no longer valid")
            return

        if batch:
            last_id = batch[-1]["id"]
            yield f"data: {json.dumps({'type': 'messages', 'data': batch})}\n\n"

        await asyncio.sleep(interval)


@router.get("/stream")
async def stream_messages(
    request: Request,
    current_user: Identity = Depends(deps.get_current_user),
    token: Optional[str] = Depends(deps.get_token),
    session_factory: Callable[[], Session] = Depends(deps.get_session_factory)
) -> Any:
    return StreamingResponse(
        message_events(request, token, current_user, session_factory),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"}
    )


def _store_exchange(db: Session, identity: Identity, question: str, reply: str):
    admin = messaging.first_admin(db)
    receiver_id = identity.id if identity.is_admin or admin is None else admin.id
    messaging.send_message(db, identity.id, receiver_id, question)
    if admin is not None:
        messaging.send_message(db, admin.id, identity.id, f"{BOT_PREFIX}{reply}")


@router.post("/bot")
async def ask_assistant(
    bot_in: BotRequest,
    db: Session = Depends(deps.get_db),
    current_user: Identity = Depends(deps.get_current_user),
    client: AssistantClient = Depends(get_assistant_client)
) -> Any:
    """Answer a catalog question and keep both sides in the message log."""
    question = bot_in.message.strip()
    prompt = await run_in_threadpool(build_prompt, db, question)
    try:
        reply = await client.complete(prompt)
    except httpx.HTTPError as e:
        logger.error(f"Assistant request failed for user {current_user.id}: {e}")
        raise AssistantError()

    await run_in_threadpool(_store_exchange, db, current_user, question, reply)
    return {"success": True, "response": reply}
