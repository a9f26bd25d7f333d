"""
AI Client for Orca

Handles all communication with the remote conversational model:
- One-shot completions (CV analysis)
- Stateful chat sessions (the interview itself)

Uses Gemini models served through the Databricks AI Gateway.
Integrated with Langfuse for observability and tracing.
"""

import logging
from typing import Any

import httpx
from langfuse import Langfuse

from orca.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """Raised when a remote model call fails."""
    pass


class AIClient:
    """
    Gateway to the remote conversational model via Databricks.

    Endpoint Selection:
    - Chat endpoint: interview turns (stateful, full history per call)
    - Analysis endpoint: CV analysis (single request, low latency)

    Observability:
    - Langfuse span per model call when configured
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client with Databricks configuration.

        Args:
            settings: Application settings (defaults to the cached instance)
            transport: Optional httpx transport, used to stub the network
        """
        self.settings = settings or get_settings()
        self.base_url = self.settings.databricks_host.rstrip("/")
        self.headers = {
            "Authorization": f"Bearer {self.settings.databricks_token}",
            "Content-Type": "application/json",
        }

        # HTTP client for API calls
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.settings.request_timeout_seconds,
            transport=transport,
        )

        # Initialize Langfuse for observability
        self.langfuse = None
        if self.settings.langfuse_enabled:
            if self.settings.langfuse_secret_key and self.settings.langfuse_public_key:
                try:
                    self.langfuse = Langfuse(
                        secret_key=self.settings.langfuse_secret_key,
                        public_key=self.settings.langfuse_public_key,
                        host=self.settings.langfuse_base_url,
                    )
                    logger.info("Langfuse initialized for LLM observability")
                except Exception as e:
                    logger.warning(f"Failed to initialize Langfuse: {e}")
            else:
                logger.info("Langfuse keys not configured, tracing disabled")

    async def close(self):
        """Close the HTTP client and flush Langfuse."""
        await self.client.aclose()
        if self.langfuse:
            try:
                self.langfuse.flush()
            except Exception as e:
                logger.warning(f"Failed to flush Langfuse: {e}")

    # =========================================================================
    # CORE AI OPERATIONS
    # =========================================================================

    def _extract_content(self, result: dict) -> str:
        """Extract text content from API response, handling list/dict formats."""
        choices = result.get("choices") or [{}]
        content = choices[0].get("message", {}).get("content", "")

        # Handle case where content is a list (multi-part response)
        if isinstance(content, list):
            text_parts = []
            for part in content:
                if isinstance(part, str):
                    text_parts.append(part)
                elif isinstance(part, dict) and "text" in part:
                    text_parts.append(part["text"])
            content = "".join(text_parts)

        return content if isinstance(content, str) else str(content)

    def _start_span(self, name: str, metadata: dict[str, Any]) -> Any:
        """Open a Langfuse span, or return None when tracing is off."""
        if not self.langfuse:
            return None
        try:
            return self.langfuse.start_span(name=name, metadata=metadata)
        except Exception as lf_err:
            logger.warning(f"Langfuse span start failed: {lf_err}")
            return None

    def _end_span(self, span: Any, output: dict[str, Any]) -> None:
        if not span:
            return
        try:
            span.update(output=output)
            span.end()
        except Exception as lf_err:
            logger.warning(f"Langfuse span end failed: {lf_err}")

    async def complete(
        self,
        messages: list[dict[str, Any]],
        endpoint: str,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        trace_name: str = "model_call",
    ) -> str:
        """
        Send a message list to a model endpoint and return the reply text.

        Args:
            messages: Chat-completions style messages, oldest first
            endpoint: Serving endpoint path
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature
            trace_name: Name for the Langfuse span

        Returns:
            Model response text

        Raises:
            SessionError: On any transport, HTTP or envelope failure
        """
        span = self._start_span(
            trace_name,
            {"endpoint": endpoint, "message_count": len(messages)},
        )
        payload = {
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        try:
            response = await self.client.post(endpoint, json=payload)
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Model API error ({trace_name}): {e}")
            self._end_span(span, {"error": str(e)})
            raise SessionError(f"Model request failed: {e}") from e
        except ValueError as e:
            logger.error(f"Model API returned invalid JSON ({trace_name}): {e}")
            self._end_span(span, {"error": "invalid_json"})
            raise SessionError("Model returned an unreadable response") from e

        if not isinstance(result, dict):
            self._end_span(span, {"error": "unexpected_envelope"})
            raise SessionError("Model returned an unexpected response envelope")

        text = self._extract_content(result)
        self._end_span(span, {"response_length": len(text)})
        return text

    def open_chat(self, system_instruction: str) -> "ChatSession":
        """Open a new stateful chat session seeded with instructions."""
        return ChatSession(self, system_instruction)


class ChatSession:
    """
    A stateful conversation with the remote model.

    The endpoint itself is stateless, so the full ordered history is resent
    on every turn. Turns are recorded only once a reply arrives, keeping the
    history aligned with what the model has actually answered.
    """

    def __init__(self, client: AIClient, system_instruction: str):
        self.client = client
        self.messages: list[dict[str, Any]] = [
            {"role": "system", "content": system_instruction}
        ]

    @property
    def turn_count(self) -> int:
        """Number of completed user/assistant exchanges."""
        return sum(1 for m in self.messages if m["role"] == "assistant")

    async def send(self, message: str) -> str:
        """
        Send one user message and wait for the model's reply.

        Raises:
            SessionError: If the remote call fails; history is left unchanged
        """
        pending = self.messages + [{"role": "user", "content": message}]
        settings = self.client.settings

        reply = await self.client.complete(
            pending,
            endpoint=settings.chat_endpoint,
            max_tokens=settings.chat_max_tokens,
            temperature=settings.chat_temperature,
            trace_name="interview_turn",
        )

        self.messages = pending + [{"role": "assistant", "content": reply}]
        return reply
