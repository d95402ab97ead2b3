"""Test console view tests."""

import json

from src.features.backend.models import DEFAULT_GREETING
from src.features.chat_test.view import APOLOGY
from tests.conftest import COOKIE_NAME


def test_console_opens_with_greeting(signed_in_client):
    data = signed_in_client.get("/dashboard/chatbot/test").json()

    assert data["status"] == "ready"
    assert data["chatbot_name"] == "Support Bot"
    assert data["messages"] == [
        {"role": "assistant", "content": "Hi there! Ask me anything.", "sources": None}
    ]
    assert data["typing"] is False


def test_send_message_appends_question_and_answer(signed_in_client, fake_backend):
    signed_in_client.get("/dashboard/chatbot/test")

    response = signed_in_client.post(
        "/dashboard/chatbot/test/messages", json={"message": "What are your hours?"}
    )

    messages = response.json()["messages"]
    assert [m["role"] for m in messages] == ["assistant", "user", "assistant"]
    assert messages[1]["content"] == "What are your hours?"
    assert messages[2]["content"] == "We are open 9am to 5pm, Monday to Friday."
    assert messages[2]["sources"][0]["title"] == "FAQ Document"

    sent = json.loads(fake_backend.requests[-1].content)
    assert sent["query"] == "What are your hours?"
    assert sent["chatbot_id"] == "bot-1"


def test_failed_answer_appends_apology(signed_in_client, fake_backend):
    signed_in_client.get("/dashboard/chatbot/test")
    fake_backend.fail = (500, {"detail": "model unavailable"})

    data = signed_in_client.post(
        "/dashboard/chatbot/test/messages", json={"message": "Hello?"}
    ).json()

    assert [m["content"] for m in data["messages"][1:]] == ["Hello?", APOLOGY]
    assert data["banner"] == {"kind": "error", "message": "model unavailable"}
    assert data["status"] == "ready"
    assert data["typing"] is False


def test_blank_message_is_not_sent(signed_in_client, fake_backend):
    signed_in_client.get("/dashboard/chatbot/test")

    data = signed_in_client.post(
        "/dashboard/chatbot/test/messages", json={"message": "   "}
    ).json()

    assert len(data["messages"]) == 1
    assert data["banner"]["message"] == "Please enter a message"
    assert "POST /rag/chat" not in fake_backend.paths()


def test_reset_returns_to_greeting(signed_in_client):
    signed_in_client.get("/dashboard/chatbot/test")
    signed_in_client.post("/dashboard/chatbot/test/messages", json={"message": "Hi"})

    data = signed_in_client.delete("/dashboard/chatbot/test/messages").json()

    assert len(data["messages"]) == 1
    assert data["messages"][0]["content"] == "Hi there! Ask me anything."


def test_remount_starts_a_new_conversation(signed_in_client):
    signed_in_client.get("/dashboard/chatbot/test")
    signed_in_client.post("/dashboard/chatbot/test/messages", json={"message": "Hi"})

    data = signed_in_client.get("/dashboard/chatbot/test").json()

    assert len(data["messages"]) == 1


def test_demo_console_answers_with_citations(demo_client):
    data = demo_client.get("/dashboard/chatbot/test").json()
    assert data["messages"][0]["content"].startswith("Hello! I'm a demo chatbot.")

    data = demo_client.post(
        "/dashboard/chatbot/test/messages", json={"message": "What are your hours?"}
    ).json()

    answer = data["messages"][-1]
    assert answer["role"] == "assistant"
    assert [s["title"] for s in answer["sources"]] == ["FAQ Document", "Company Website"]


def test_sending_is_rate_limited_per_session(client, make_token):
    client.cookies.set(COOKIE_NAME, make_token(user_id="rate-limited-user"))
    client.get("/dashboard/chatbot/test")

    codes = [
        client.post(
            "/dashboard/chatbot/test/messages", json={"message": f"Question {i}"}
        ).status_code
        for i in range(21)
    ]

    assert codes[:20] == [200] * 20
    assert codes[20] == 429


def test_failed_chatbot_fetch_still_opens_on_default_greeting(signed_in_client, fake_backend):
    fake_backend.fail = (503, {"detail": "backend starting"})

    data = signed_in_client.get("/dashboard/chatbot/test").json()

    assert data["status"] == "error"
    assert data["error_kind"] == "fetch"
    assert [m["content"] for m in data["messages"]] == [DEFAULT_GREETING]


def test_send_after_failed_fetch_reloads_chatbot_first(signed_in_client, fake_backend):
    fake_backend.fail = (503, {"detail": "backend starting"})
    signed_in_client.get("/dashboard/chatbot/test")
    fake_backend.fail = None

    data = signed_in_client.post(
        "/dashboard/chatbot/test/messages", json={"message": "hi"}
    ).json()

    assert data["status"] == "ready"
    assert data["error"] is None
    assert [m["content"] for m in data["messages"]] == [
        "Hi there! Ask me anything.",
        "hi",
        "We are open 9am to 5pm, Monday to Friday.",
    ]


def test_send_is_refused_while_chatbot_cannot_be_loaded(signed_in_client, fake_backend):
    fake_backend.fail = (503, {"detail": "backend starting"})
    signed_in_client.get("/dashboard/chatbot/test")

    data = signed_in_client.post(
        "/dashboard/chatbot/test/messages", json={"message": "hi"}
    ).json()

    assert data["status"] == "error"
    assert [m["content"] for m in data["messages"]] == [DEFAULT_GREETING]
    assert data["banner"] == {"kind": "error", "message": "backend starting"}
    assert "POST /rag/chat" not in fake_backend.paths()
