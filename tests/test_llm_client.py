"""Tests for the chat-completions client."""
from unittest.mock import MagicMock

import pytest
import requests

from core.envai.exceptions import AssistantError
from core.envai.llm_client import LLMClient


@pytest.fixture
def client():
    """LLMClient with a mocked session."""
    llm = LLMClient("https://llm.test/v1/", "sk-test", "test-model", timeout=5)
    llm.session = MagicMock()
    return llm


def _response(payload=None, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
    return response


class TestComplete:
    """Tests for completion requests."""

    def test_headers(self):
        llm = LLMClient("https://llm.test/v1", "sk-test", "test-model")
        assert llm.session.headers["Authorization"] == "Bearer sk-test"

    def test_returns_reply_text(self, client):
        client.session.post.return_value = _response(
            {"choices": [{"message": {"role": "assistant", "content": "<p>It is warm.</p>"}}]}
        )

        answer = client.complete("How warm is it?")

        assert answer == "<p>It is warm.</p>"
        url = client.session.post.call_args.args[0]
        body = client.session.post.call_args.kwargs["json"]
        assert url == "https://llm.test/v1/chat/completions"
        assert body["model"] == "test-model"
        assert body["messages"] == [{"role": "user", "content": "How warm is it?"}]
        assert body["temperature"] == 0.7
        assert body["max_tokens"] == 500

    def test_missing_content(self, client):
        client.session.post.return_value = _response({"choices": []})
        assert client.complete("Hello") == "No response from AI model."

    def test_http_error(self, client):
        client.session.post.return_value = _response(status_code=500)
        with pytest.raises(AssistantError, match="500"):
            client.complete("Hello")

    def test_connection_error(self, client):
        client.session.post.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(AssistantError):
            client.complete("Hello")


class TestHealthCheck:
    """Tests for the service health probe."""

    def test_healthy(self, client):
        client.session.get.return_value = _response({"data": []})

        assert client.health_check() is True
        assert client.session.get.call_args.args[0] == "https://llm.test/v1/models"

    def test_unreachable(self, client):
        client.session.get.side_effect = requests.exceptions.Timeout("slow")
        assert client.health_check() is False
