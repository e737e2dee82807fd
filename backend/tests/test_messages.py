import asyncio
import json

import httpx
import pytest

from app.api.endpoints.chat import message_events
from app.main import app
from app.models.message import Message
from app.services import messaging
from app.services.assistant import AssistantClient, build_prompt, get_assistant_client
from app.services.auth import AuthService, to_identity

from conftest import USER_PASSWORD, make_user


class FakeAssistant:
    def __init__(self, reply="Try Dark Mystery tonight.", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    async def complete(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply


class FakeRequest:
    """Stays connected for a fixed number of polls."""

    def __init__(self, polls):
        self.polls = polls

    async def is_disconnected(self):
        self.polls -= 1
        return self.polls < 0


def test_user_message_defaults_to_admin(client, admin, user, user_headers):
    response = client.post("/api/messages", json={"content": "  Hello there  "}, headers=user_headers)
    assert response.status_code == 200
    message = response.json()["message"]
    assert message["content"] == "Hello there"
    assert message["senderId"] == user.id
    assert message["receiverId"] == admin.id
    assert message["sender"]["name"] == "Usuario Demo"
    assert message["isRead"] is False


def test_user_cannot_message_other_users(client, db, user, user_headers):
    other = make_user(db, "Other", "other-pass")
    response = client.post(
        "/api/messages", json={"content": "hi", "receiverId": other.id}, headers=user_headers
    )
    assert response.status_code == 403


def test_admin_must_name_receiver(client, admin_headers, user):
    assert client.post("/api/messages", json={"content": "hi"}, headers=admin_headers).status_code == 400
    response = client.post(
        "/api/messages", json={"content": "hi", "receiverId": user.id}, headers=admin_headers
    )
    assert response.status_code == 200


def test_unknown_receiver_is_not_found(client, admin_headers):
    response = client.post("/api/messages", json={"content": "hi", "receiverId": 999}, headers=admin_headers)
    assert response.status_code == 404


def test_blank_message_is_rejected(client, admin, user_headers):
    assert client.post("/api/messages", json={"content": " "}, headers=user_headers).status_code == 400


def test_message_visibility(client, db, admin, user, admin_headers, user_headers):
    other = make_user(db, "Other", "other-pass")
    messaging.send_message(db, user.id, admin.id, "from user")
    messaging.send_message(db, other.id, admin.id, "from other")
    messaging.send_message(db, admin.id, user.id, "to user")

    mine = client.get("/api/messages", headers=user_headers).json()["messages"]
    assert [m["content"] for m in mine] == ["from user", "to user"]

    everything = client.get("/api/messages", headers=admin_headers).json()["messages"]
    assert len(everything) == 3


def test_fetch_new_messages_pages_by_id(db, admin, user):
    ids = [messaging.send_message(db, user.id, admin.id, f"m{n}").id for n in range(5)]
    identity = to_identity(user)

    batch = messaging.fetch_new_messages(db, identity, ids[1], limit=2)
    assert [m.id for m in batch] == ids[2:4]


def collect_events(token, identity, session_factory, polls):
    async def collect():
        events = []
        async for event in message_events(FakeRequest(polls), token, identity, session_factory, interval=0):
            events.append(event)
        return events

    return asyncio.run(collect())


def test_message_events_stream_only_new_messages(db, session_factory, admin, user):
    identity, token = AuthService(db).authenticate(USER_PASSWORD)
    messaging.send_message(db, user.id, admin.id, "first")
    messaging.send_message(db, admin.id, user.id, "second")

    events = collect_events(token, identity, session_factory, polls=2)

    assert len(events) == 1
    assert events[0].startswith("data: ") and events[0].endswith("\n\n")
    payload = json.loads(events[0][len("data: "):])
    assert payload["type"] == "messages"
    assert [m["content"] for m in payload["data"]] == ["first", "second"]


def test_message_events_stop_after_logout(db, session_factory, admin, user):
    service = AuthService(db)
    identity, token = service.authenticate(USER_PASSWORD)
    messaging.send_message(db, admin.id, user.id, "hidden")
    service.logout(token)

    request = FakeRequest(polls=100)

    async def collect():
        return [event async for event in message_events(request, token, identity, session_factory, interval=0)]

    assert asyncio.run(collect()) == []
    # Ended on the first poll, long before the client went away
    assert request.polls == 99


def test_message_events_stop_after_suspension(db, session_factory, admin, user):
    identity, token = AuthService(db).authenticate(USER_PASSWORD)
    messaging.send_message(db, admin.id, user.id, "hidden")
    user.is_suspended = True
    db.commit()

    assert collect_events(token, identity, session_factory, polls=100) == []


def test_chat_stream_requires_login(client):
    assert client.get("/api/chat/stream").status_code == 401


def test_bot_stores_both_sides(client, db, admin, user, user_headers):
    assistant = FakeAssistant()
    app.dependency_overrides[get_assistant_client] = lambda: assistant

    response = client.post("/api/chat/bot", json={"message": "What should I watch?"}, headers=user_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "response": "Try Dark Mystery tonight."}
    assert "What should I watch?" in assistant.prompts[0]

    stored = db.query(Message).order_by(Message.id).all()
    assert [(m.sender_id, m.receiver_id) for m in stored] == [(user.id, admin.id), (admin.id, user.id)]
    assert stored[1].content == "🤖 Try Dark Mystery tonight."


def test_bot_failure_is_reported_and_not_stored(client, db, admin, user_headers):
    app.dependency_overrides[get_assistant_client] = lambda: FakeAssistant(error=httpx.ConnectError("down"))

    response = client.post("/api/chat/bot", json={"message": "hello"}, headers=user_headers)
    assert response.status_code == 502
    assert response.json()["success"] is False
    assert db.query(Message).count() == 0


def test_build_prompt_embeds_catalog(db):
    from app.models.channel import Channel
    from app.models.movie import Movie

    db.add(Movie(
        title="Family Comedy", synopsis="s", genre="Comedy", year=2022, duration=95,
        ranking=7.8, cover_url="c", video_url="v"
    ))
    db.add(Channel(name="Sports Channel", cover_url="c", m3u8_url="u"))
    db.commit()

    prompt = build_prompt(db, "  any comedies?  ")
    assert '"Family Comedy" (2022) - Comedy - Rating: 7.8/10' in prompt
    assert "Sports Channel" in prompt
    assert prompt.endswith("User question: any comedies?")


@pytest.mark.parametrize("data, expected", [
    ({"choices": [{"message": {"content": " Enjoy! "}}]}, "Enjoy!"),
    ({"choices": []}, "Sorry, I could not process your question right now."),
    ({}, "Sorry, I could not process your question right now."),
])
def test_extract_reply(data, expected):
    assert AssistantClient._extract_reply(data) == expected
