"""
Simple chat-completions client for the dashboard assistant

Minimal client for any OpenAI-compatible API (OpenAI, LiteLLM, Ollama).
"""

import logging
import time

import requests

from .exceptions import AssistantError

logger = logging.getLogger(__name__)


class LLMClient:
    """Simple OpenAI-compatible REST API client."""

    def __init__(self, base_url: str, api_key: str, model: str, timeout: float = 30.0):
        """Initialize LLM client.

        Args:
            base_url: API base URL (e.g., "https://api.openai.com/v1")
            api_key: Bearer token
            model: Model name sent with every completion
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        # Create a session for connection pooling
        self.session = requests.Session()
        self.session.headers.update(self.headers)
        self.timeout = timeout

    def complete(self, prompt: str, temperature: float = 0.7, max_tokens: int = 500) -> str:
        """Send a single user message and return the reply text.

        Raises:
            AssistantError: If the request fails or the reply is malformed
        """
        url = f"{self.base_url}/chat/completions"
        data = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        start = time.monotonic()
        try:
            response = self.session.post(url, json=data, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.HTTPError as e:
            raise AssistantError(f"LLM API error: {e.response.status_code}") from e
        except requests.exceptions.RequestException as e:
            raise AssistantError(f"LLM API request failed: {e}") from e
        except ValueError as e:
            raise AssistantError(f"LLM API returned invalid JSON: {e}") from e

        logger.info(f"LLM request completed in {(time.monotonic() - start) * 1000:.0f}ms")

        try:
            content = payload["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        return content or "No response from AI model."

    def health_check(self) -> bool:
        """True when the models endpoint answers."""
        try:
            response = self.session.get(f"{self.base_url}/models", timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning(f"LLM health check failed: {e}")
            return False
        return response.ok
