"""Shared fixtures: settings, session tokens and a fake chatbot backend."""

import json
import os
import re

os.environ["SESSION_JWT_SECRET"] = "test-session-secret"
os.environ["BACKEND_API_URL"] = "http://backend.test"
os.environ["BACKEND_API_KEY"] = "fallback-key"
os.environ["DEMO_MODE"] = "false"

import httpx
import pytest
from fastapi.testclient import TestClient

from src.config import Settings
from src.features.auth.jwt import create_session_token
from src.main import create_app

TEST_SECRET = "test-session-secret"
COOKIE_NAME = "sb-auth-token"
CHATBOT_ID = "bot-1"


class FakeBackend:
    """In-memory stand-in for the chatbot backend API."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.fail: tuple[int, object] | None = None
        self.widget_config = {
            "logo_url": "",
            "name": "Support Bot",
            "primary_color": "#6366F1",
            "bubble_size": "medium",
            "position": "right",
            "greeting": "Hi there! Ask me anything.",
            "theme": "light",
            "model": "gpt-4o",
            "temperature": 0.7,
            "top_k": 3,
            "use_query_expansion": False,
        }
        self.system_prompt = "You are a support assistant."
        self.sources = [
            {
                "id": "mock-1",
                "chatbot_id": CHATBOT_ID,
                "type": "Document",
                "name": "FAQ Document",
                "processing_status": "completed",
            },
            {
                "id": "mock-2",
                "chatbot_id": CHATBOT_ID,
                "type": "Website",
                "name": "Company Website",
                "processing_status": "processing",
            },
        ]
        self.next_id = 3

    def paths(self) -> list[str]:
        return [f"{r.method} {r.url.path}" for r in self.requests]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail is not None:
            status, body = self.fail
            if isinstance(body, (bytes, str)):
                return httpx.Response(status, content=body)
            return httpx.Response(status, json=body)

        method, path = request.method, request.url.path
        body = json.loads(request.content) if request.content else None

        if match := re.fullmatch(r"/chatbots/([^/]+)", path):
            return httpx.Response(
                200,
                json={
                    "id": match.group(1),
                    "name": "Support Bot",
                    "status": "active",
                    "system_prompt": self.system_prompt,
                    "widget_config": self.widget_config,
                },
            )
        if re.fullmatch(r"/chatbots/[^/]+/widget-config", path):
            if method == "PUT":
                self.widget_config = body
            return httpx.Response(200, json=self.widget_config)
        if re.fullmatch(r"/chatbots/[^/]+/system-prompt", path):
            if method == "PUT":
                self.system_prompt = body["system_prompt"]
            return httpx.Response(200, json={"system_prompt": self.system_prompt})
        if path == "/knowledge-sources/" and method == "GET":
            chatbot_id = request.url.params.get("chatbot_id")
            return httpx.Response(
                200, json=[s for s in self.sources if s["chatbot_id"] == chatbot_id]
            )
        if path in ("/knowledge-sources/", "/knowledge-sources/crawl-website"):
            source = {
                "id": f"src-{self.next_id}",
                "chatbot_id": body["chatbot_id"],
                "type": "Website" if "url" in body else "Document",
                "name": body.get("name") or body.get("url"),
                "content": body.get("content"),
                "processing_status": "pending",
            }
            self.next_id += 1
            self.sources.append(source)
            return httpx.Response(200, json=source)
        if match := re.fullmatch(r"/knowledge-sources/([^/]+)", path):
            found = [s for s in self.sources if s["id"] == match.group(1)]
            if not found:
                return httpx.Response(404, json={"detail": "Knowledge source not found"})
            if method == "DELETE":
                self.sources.remove(found[0])
                return httpx.Response(200, json={"status": "deleted"})
            return httpx.Response(200, json=found[0])
        if path == "/rag/chat":
            return httpx.Response(
                200,
                json={
                    "answer": "We are open 9am to 5pm, Monday to Friday.",
                    "sources": [
                        {
                            "chunk_id": "c1",
                            "content": "Opening hours: 9-17 on weekdays",
                            "source": "faq.txt",
                            "title": "FAQ Document",
                        }
                    ],
                },
            )
        if path == "/rag/search":
            return httpx.Response(
                200,
                json=[
                    {
                        "chunk_id": "c1",
                        "content": "Opening hours: 9-17 on weekdays",
                        "similarity": 0.91,
                        "metadata": {"source": "faq.txt", "title": "FAQ Document"},
                        "chunking_strategy": "hierarchical",
                    }
                ],
            )
        if re.fullmatch(r"/stats/chatbot/[^/]+", path):
            return httpx.Response(
                200,
                json={
                    "totalConversations": 12,
                    "totalMessages": 80,
                    "avgResponseTime": 0.8,
                    "dailyUsage": [
                        {"date": "Mon", "count": 5},
                        {"date": "Tue", "count": 7},
                    ],
                    "topQuestions": [{"question": "What are your hours?", "count": 4}],
                },
            )
        return httpx.Response(404, json={"detail": "Not found"})


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        backend_api_url="http://backend.test",
        backend_api_key="fallback-key",
        session_jwt_secret=TEST_SECRET,
        session_cookie_name=COOKIE_NAME,
        demo_mode=False,
    )


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def transport(fake_backend) -> httpx.MockTransport:
    return httpx.MockTransport(fake_backend.handle)


@pytest.fixture
def make_token():
    def _make(metadata: dict | None = None, user_id: str = "user-1", **kwargs) -> str:
        if metadata is None:
            metadata = {"apiKey": "user-key", "chatbotId": CHATBOT_ID}
        return create_session_token(
            user_id,
            TEST_SECRET,
            email="owner@example.com",
            metadata=metadata,
            **kwargs,
        )

    return _make


@pytest.fixture
def client(settings, transport):
    """Test client for the live-mode app talking to the fake backend."""
    app = create_app(settings, transport=transport)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def signed_in_client(client, make_token):
    client.cookies.set(COOKIE_NAME, make_token())
    return client


@pytest.fixture
def demo_client(settings, make_token):
    """Signed-in test client for a demo-mode app."""
    app = create_app(settings.model_copy(update={"demo_mode": True}))
    with TestClient(app) as c:
        c.cookies.set(COOKIE_NAME, make_token())
        yield c
