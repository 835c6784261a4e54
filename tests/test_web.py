"""
Tests for the HTTP API using Flask's test client.
"""
from unittest.mock import MagicMock, patch

import pytest

from gtd.services.ai_service import MISSING_API_KEY_MESSAGE, AIService, AISettings
from gtd.web import create_app

TASK = {"id": "t1", "title": "Fix the fence", "status": "inbox", "priority": "high"}


@pytest.fixture
def fake_client(fake_ai):
    app = create_app(ai_service=fake_ai)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def unconfigured_client():
    app = create_app(ai_service=AIService())
    app.config["TESTING"] = True
    return app.test_client()


class TestAdviceEndpoint:
    def test_organization(self, fake_client, fake_ai):
        response = fake_client.post("/api/ai/advice", json={
            "type": "organization",
            "task": TASK,
            "projects": [{"id": "p1", "name": "Garden"}],
            "contexts": [{"id": "c1", "name": "@home"}],
        })
        assert response.status_code == 200
        assert response.get_json() == {"advice": fake_ai.reply}

        name, args, _ = fake_ai.calls[-1]
        assert name == "organization"
        assert args[0].title == "Fix the fence"
        assert [p.name for p in args[1]] == ["Garden"]
        assert [c.name for c in args[2]] == ["@home"]

    @pytest.mark.parametrize("advice_type", ["organization", "implementation"])
    def test_task_required(self, fake_client, advice_type):
        response = fake_client.post("/api/ai/advice", json={"type": advice_type})
        assert response.status_code == 400
        assert response.get_json() == {"error": "Task is required"}

    def test_scheduling_requires_task_array(self, fake_client):
        response = fake_client.post("/api/ai/advice", json={"type": "scheduling", "tasks": "all of them"})
        assert response.status_code == 400
        assert response.get_json() == {"error": "Tasks array is required"}

    def test_scheduling_defaults_to_empty_list(self, fake_client, fake_ai):
        response = fake_client.post("/api/ai/advice", json={"type": "scheduling"})
        assert response.status_code == 200
        assert fake_ai.calls[-1][1][0] == []

    def test_what_to_do_now_reads_current_context(self, fake_client, fake_ai):
        response = fake_client.post("/api/ai/advice", json={
            "type": "what-to-do-now",
            "tasks": [TASK],
            "contexts": "not a list",
            "context": {"currentContext": "@office"},
        })
        assert response.status_code == 200
        _, args, _ = fake_ai.calls[-1]
        assert [t.id for t in args[0]] == ["t1"]
        assert args[1] == []
        assert args[2] == "@office"

    def test_invalid_type(self, fake_client):
        response = fake_client.post("/api/ai/advice", json={"type": "horoscope"})
        assert response.status_code == 400
        assert response.get_json() == {"error": "Invalid advice type"}

    def test_missing_body_is_invalid_type(self, fake_client):
        response = fake_client.post("/api/ai/advice", data="nonsense", content_type="text/plain")
        assert response.status_code == 400
        assert response.get_json() == {"error": "Invalid advice type"}

    def test_malformed_task(self, fake_client):
        response = fake_client.post("/api/ai/advice", json={
            "type": "implementation",
            "task": {"title": "x", "status": "doing"},
        })
        assert response.status_code == 400
        assert response.get_json()["error"].startswith("Invalid payload")

    def test_missing_api_key_is_500(self, unconfigured_client):
        response = unconfigured_client.post("/api/ai/advice", json={"type": "organization", "task": TASK})
        assert response.status_code == 500
        assert response.get_json() == {"error": MISSING_API_KEY_MESSAGE}

    def test_upstream_error_is_500(self):
        app = create_app(ai_service=AIService(AISettings(provider="openai", api_key="k")))
        upstream = MagicMock(ok=False, status_code=503, text="overloaded")
        with patch("gtd.services.ai_service.requests.post", return_value=upstream):
            response = app.test_client().post(
                "/api/ai/advice", json={"type": "implementation", "task": TASK}
            )
        assert response.status_code == 500
        assert response.get_json() == {"error": "AI API error: 503 - overloaded"}


class TestChatEndpoint:
    def test_message_required(self, fake_client):
        response = fake_client.post("/api/ai/chat", json={})
        assert response.status_code == 400
        assert response.get_json() == {"error": "Message required"}

    def test_chat_with_context(self, fake_client, fake_ai):
        response = fake_client.post("/api/ai/chat", json={
            "message": "What next?",
            "context": {
                "tasks": [TASK],
                "projects": [{"id": "p1", "name": "Garden"}],
                "currentTask": TASK,
            },
        })
        assert response.status_code == 200
        assert response.get_json() == {"response": fake_ai.reply}

        _, args, kwargs = fake_ai.calls[-1]
        assert args == ("What next?",)
        assert [t.id for t in kwargs["tasks"]] == ["t1"]
        assert kwargs["current_task"].title == "Fix the fence"

    def test_chat_without_context(self, fake_client, fake_ai):
        response = fake_client.post("/api/ai/chat", json={"message": "Hi"})
        assert response.status_code == 200
        _, _, kwargs = fake_ai.calls[-1]
        assert kwargs["tasks"] == []
        assert kwargs["current_task"] is None

    def test_chat_missing_api_key(self, unconfigured_client):
        response = unconfigured_client.post("/api/ai/chat", json={"message": "Hi"})
        assert response.status_code == 500
        assert response.get_json() == {"error": MISSING_API_KEY_MESSAGE}


def test_cors_headers(fake_client):
    response = fake_client.post(
        "/api/ai/chat", json={"message": "Hi"}, headers={"Origin": "http://localhost:3000"}
    )
    assert response.headers.get("Access-Control-Allow-Origin") == "*"


def test_malformed_choices_falls_back():
    app = create_app(ai_service=AIService(AISettings(provider="openai", api_key="k")))
    upstream = MagicMock(ok=True, status_code=200)
    upstream.json.return_value = {"choices": {"first": {"message": {"content": "x"}}}}
    with patch("gtd.services.ai_service.requests.post", return_value=upstream):
        response = app.test_client().post("/api/ai/chat", json={"message": "Hi"})
    assert response.status_code == 200
    assert response.get_json() == {"response": "Unable to get a reply from the AI service."}
