"""Chatbot configuration view tests."""

import json

from tests.conftest import COOKIE_NAME


def test_mount_loads_chatbot_config_and_prompt(signed_in_client, fake_backend):
    response = signed_in_client.get("/dashboard/chatbot")

    data = response.json()
    assert data["status"] == "ready"
    assert data["chatbot"]["name"] == "Support Bot"
    assert data["widget_config"]["primary_color"] == "#6366F1"
    assert data["system_prompt"] == "You are a support assistant."
    assert sorted(fake_backend.paths()) == [
        "GET /chatbots/bot-1",
        "GET /chatbots/bot-1/system-prompt",
        "GET /chatbots/bot-1/widget-config",
    ]


def test_widget_config_round_trip(signed_in_client, fake_backend):
    config = signed_in_client.get("/dashboard/chatbot").json()["widget_config"]
    config["primary_color"] = "#112233"

    response = signed_in_client.put("/dashboard/chatbot/widget-config", json=config)

    data = response.json()
    assert data["banner"] == {"kind": "success", "message": "Widget configuration saved"}
    assert data["widget_config"]["primary_color"] == "#112233"
    assert data["chatbot"]["widget_config"]["primary_color"] == "#112233"

    sent = json.loads(fake_backend.requests[-1].content)
    assert sent == config

    reloaded = signed_in_client.get("/dashboard/chatbot").json()
    assert reloaded["widget_config"]["primary_color"] == "#112233"


def test_invalid_widget_config_is_rejected(signed_in_client, fake_backend):
    config = signed_in_client.get("/dashboard/chatbot").json()["widget_config"]

    for field, value in (
        ("temperature", 2),
        ("top_k", 0),
        ("primary_color", "blue"),
        ("position", "top"),
    ):
        response = signed_in_client.put(
            "/dashboard/chatbot/widget-config", json={**config, field: value}
        )
        assert response.status_code == 422, field

    assert not any(r.method == "PUT" for r in fake_backend.requests)


def test_save_system_prompt(signed_in_client, fake_backend):
    signed_in_client.get("/dashboard/chatbot")

    response = signed_in_client.put(
        "/dashboard/chatbot/system-prompt", json={"system_prompt": "Be brief."}
    )

    data = response.json()
    assert data["system_prompt"] == "Be brief."
    assert data["chatbot"]["system_prompt"] == "Be brief."
    assert data["banner"] == {"kind": "success", "message": "System prompt saved"}
    assert fake_backend.system_prompt == "Be brief."


def test_failed_save_keeps_previous_prompt(signed_in_client, fake_backend):
    signed_in_client.get("/dashboard/chatbot")
    fake_backend.fail = (500, {"detail": "Could not save"})

    data = signed_in_client.put(
        "/dashboard/chatbot/system-prompt", json={"system_prompt": "Be brief."}
    ).json()

    assert data["status"] == "ready"
    assert data["system_prompt"] == "You are a support assistant."
    assert data["banner"] == {"kind": "error", "message": "Could not save"}
    assert data["busy"] == []


def test_embed_code_uses_widget_position(signed_in_client):
    signed_in_client.get("/dashboard/chatbot")

    data = signed_in_client.get("/dashboard/chatbot/embed-code").json()

    assert data["chatbot_id"] == "bot-1"
    assert data["position"] == "right"
    assert 'chatbotId: "bot-1"' in data["embed_code"]
    assert 'position: "right", // or "left"' in data["embed_code"]


def test_embed_code_position_override(signed_in_client):
    data = signed_in_client.get("/dashboard/chatbot/embed-code?position=left").json()

    assert data["position"] == "left"
    assert 'position: "left", // or "right"' in data["embed_code"]

    bad = signed_in_client.get("/dashboard/chatbot/embed-code?position=top")
    assert bad.status_code == 422


def test_user_without_chatbot_is_forbidden(client, fake_backend, make_token):
    client.cookies.set(COOKIE_NAME, make_token(metadata={"apiKey": "user-key"}))

    response = client.get("/dashboard/chatbot")

    assert response.status_code == 403
    data = response.json()
    assert data["error_kind"] == "no_chatbot"
    assert data["error"] == "No chatbot assigned to this user"
    assert data["login_url"] == "/login"
    assert fake_backend.requests == []


def test_mutation_without_chatbot_is_refused(client, fake_backend, make_token):
    client.cookies.set(COOKIE_NAME, make_token(metadata={}))

    response = client.put(
        "/dashboard/chatbot/system-prompt", json={"system_prompt": "Be brief."}
    )

    assert response.status_code == 403
    assert response.json()["banner"] is None
    assert fake_backend.requests == []
