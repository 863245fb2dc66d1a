from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from humanlab.core.config import Settings, get_settings
from humanlab.core.errors import ProviderError
from humanlab.core.logging import get_logger
from humanlab.services.http import client_scope, json_object
from humanlab.services.prompts import Provider, resolve_system_prompt, resolve_user_prompt
from humanlab.utils.text import require_text

logger = get_logger(__name__)


@dataclass(frozen=True)
class RewriteOutcome:
    text: str
    system_prompt: str
    user_prompt: str


class RewriteProvider:
    """Paraphrases text with an external LLM.

    Subclasses build the provider request and pull the text out of its
    response; prompt resolution, transport and error mapping live here.
    """

    provider: Provider

    def __init__(self, settings: Settings | None = None, client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings or get_settings()
        self.client = client

    @property
    def name(self) -> str:
        return self.provider.value

    def _api_key(self) -> str:
        raise NotImplementedError

    def _request(self, system_prompt: str, user_prompt: str) -> tuple[str, dict[str, str], dict[str, Any]]:
        raise NotImplementedError

    def _extract_text(self, payload: dict[str, Any]) -> str | None:
        raise NotImplementedError

    @staticmethod
    def _error_message(payload: dict[str, Any] | None) -> str | None:
        error = (payload or {}).get("error")
        if isinstance(error, dict):
            message = error.get("message")
            return message if isinstance(message, str) and message else None
        return None

    def resolve(
        self,
        text: str,
        system_prompt: str | None = None,
        user_prompt: str | None = None,
    ) -> tuple[str, str]:
        return (
            resolve_system_prompt(self.provider, system_prompt, self.settings),
            resolve_user_prompt(self.provider, text, user_prompt, self.settings),
        )

    async def rewrite(
        self,
        text: str,
        system_prompt: str | None = None,
        user_prompt: str | None = None,
    ) -> RewriteOutcome:
        text = require_text(text)
        if not self._api_key():
            raise ProviderError(f"{self.name} API key is not configured", provider=self.name)

        final_system, final_user = self.resolve(text, system_prompt, user_prompt)
        url, headers, body = self._request(final_system, final_user)

        try:
            async with client_scope(self.client, self.settings.http_timeout_seconds) as client:
                response = await client.post(url, json=body, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("rewrite_transport_failed", provider=self.name, error=type(exc).__name__)
            raise ProviderError(f"{self.name} request failed", provider=self.name) from exc

        payload = json_object(response)
        if response.is_error:
            logger.warning("rewrite_provider_error", provider=self.name, status_code=response.status_code)
            raise ProviderError(
                self._error_message(payload) or f"{self.name} returned status {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
            )

        rewritten = self._extract_text(payload) if payload is not None else None
        if not rewritten or not rewritten.strip():
            logger.warning("rewrite_empty_response", provider=self.name)
            raise ProviderError(f"{self.name} returned no text", provider=self.name)

        logger.info("rewrite_completed", provider=self.name, input_chars=len(text), output_chars=len(rewritten))
        return RewriteOutcome(text=rewritten, system_prompt=final_system, user_prompt=final_user)


class AnthropicRewriter(RewriteProvider):
    provider = Provider.ANTHROPIC

    def _api_key(self) -> str:
        return self.settings.anthropic_api_key.get_secret_value()

    def _request(self, system_prompt: str, user_prompt: str) -> tuple[str, dict[str, str], dict[str, Any]]:
        headers = {
            "x-api-key": self._api_key(),
            "anthropic-version": self.settings.anthropic_version,
            "content-type": "application/json",
        }
        body = {
            "model": self.settings.anthropic_model,
            "max_tokens": self.settings.anthropic_max_tokens,
            "temperature": self.settings.anthropic_temperature,
            "system": system_prompt,
            "messages": [
                {
                    "role": "user",
                    "content": [{"type": "text", "text": user_prompt}],
                }
            ],
        }
        return f"{self.settings.anthropic_api_url}/v1/messages", headers, body

    def _extract_text(self, payload: dict[str, Any]) -> str | None:
        for block in payload.get("content") or []:
            if isinstance(block, dict) and block.get("type") == "text":
                return block.get("text")
        return None


class GeminiRewriter(RewriteProvider):
    provider = Provider.GEMINI

    def _api_key(self) -> str:
        return self.settings.gemini_api_key.get_secret_value()

    def _request(self, system_prompt: str, user_prompt: str) -> tuple[str, dict[str, str], dict[str, Any]]:
        headers = {
            "x-goog-api-key": self._api_key(),
            "content-type": "application/json",
        }
        body = {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
        }
        url = f"{self.settings.gemini_api_url}/v1beta/models/{self.settings.gemini_model}:generateContent"
        return url, headers, body

    def _extract_text(self, payload: dict[str, Any]) -> str | None:
        candidates = payload.get("candidates") or []
        if not candidates or not isinstance(candidates[0], dict):
            return None
        parts = (candidates[0].get("content") or {}).get("parts") or []
        texts = [part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)]
        return "".join(texts) or None
