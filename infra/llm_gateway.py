"""Model gateway: one chat-completion request per assistant reply.

Translates the internal ``{role, text}`` context into the provider's
chat-completions format and normalizes the answer (or failure) into a
``ModelReply``. There are no retries; a failed call yields a degraded reply
instead of an exception.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import httpx
import structlog
from pydantic import BaseModel, Field

from api.shared.exceptions import GatewayError

logger = structlog.get_logger("chat.llm")

SYSTEM_INSTRUCTION = "You are an assistant. Answer concisely."
NOT_CONFIGURED_TEXT = "Model provider not configured."
UNREACHABLE_TEXT = "Sorry, I'm having trouble reaching the model right now."


class ModelReply(BaseModel):
    """Normalized gateway result."""

    text: str = Field(description="Assistant reply text")
    meta: Dict[str, Any] = Field(default_factory=dict, description="Provider payload or error flags")


class ModelGateway:
    """Client for an OpenAI-compatible chat-completions endpoint."""

    def __init__(
        self,
        provider_url: Optional[str],
        model: Optional[str],
        api_key: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.provider_url = provider_url
        self.model = model
        self.api_key = api_key or ""
        self.timeout = timeout
        self.transport = transport

    def is_configured(self) -> bool:
        return bool(self.provider_url) and bool(self.model)

    @staticmethod
    def build_messages(
        messages: Sequence[Dict[str, str]],
        mode: str = "open",
        document_refs: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, str]]:
        """Build the provider message list.

        The fixed instruction always comes first. Grounded conversations with
        document references get a second system entry listing them.
        """
        chat_messages = [{"role": "system", "content": SYSTEM_INSTRUCTION}]

        if mode == "grounded" and document_refs:
            chat_messages.append(
                {"role": "system", "content": "[DOCUMENTS]\n" + "\n".join(document_refs)}
            )

        for m in messages:
            chat_messages.append({"role": m["role"], "content": m["text"]})
        return chat_messages

    async def call_model(
        self,
        *,
        conversation_id: Optional[str],
        messages: Sequence[Dict[str, str]],
        mode: str = "open",
        document_refs: Optional[Sequence[str]] = None,
    ) -> ModelReply:
        if not self.is_configured():
            return ModelReply(
                text=NOT_CONFIGURED_TEXT, meta={"error": "missing_provider"}
            )

        payload = {
            "model": self.model,
            "messages": self.build_messages(messages, mode, document_refs),
            "stream": False,
        }

        try:
            data = await self._post(payload)
        except GatewayError as e:
            logger.error(
                "llm_call_failed",
                conversation_id=conversation_id,
                error=e.message,
                details=e.details.get("details"),
            )
            return ModelReply(
                text=UNREACHABLE_TEXT,
                meta={"error": True, "details": e.details.get("details")},
            )

        choices = data.get("choices") or []
        first = choices[0] if choices and isinstance(choices[0], dict) else {}
        message = first.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            content = ""

        meta: Dict[str, Any] = {"providerResponse": data}
        usage = data.get("usage") or {}
        if isinstance(usage, dict) and isinstance(usage.get("completion_tokens"), int):
            meta["tokensEstimate"] = usage["completion_tokens"]

        logger.info(
            "llm_call_succeeded",
            conversation_id=conversation_id,
            model=self.model,
            context_size=len(messages),
        )
        return ModelReply(text=content, meta=meta)

    async def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Send the single request; provider and transport failures become GatewayError."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                resp = await client.post(self.provider_url, json=payload, headers=headers)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise GatewayError(
                "llm",
                f"provider returned {e.response.status_code}",
                {"details": _error_body(e.response)},
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise GatewayError("llm", str(e), {"details": str(e)}) from e

        if not isinstance(data, dict):
            raise GatewayError(
                "llm", "unexpected response shape", {"details": data}
            )
        return data


def _error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
