from __future__ import annotations

import json
from collections.abc import Callable

import httpx


WINSTON_HOST = "api.gowinston.ai"
ANTHROPIC_HOST = "api.anthropic.com"
GEMINI_HOST = "generativelanguage.googleapis.com"

SAMPLE_TEXT = (
    "Artificial intelligence has transformed many industries by automating repetitive tasks. "
    "It allows organisations to analyse large volumes of data quickly and make informed decisions."
)


def detection_payload(text: str, score: float = 82.5) -> dict:
    return {
        "status": 200,
        "length": len(text),
        "score": score,
        "sentences": [{"length": len(text), "score": score, "text": text}],
        "readability_score": 41.2,
        "input": "text",
        "credits_used": len(text.split()),
        "credits_remaining": 9000,
        "version": "4.0",
        "language": "en",
    }


def anthropic_payload(text: str) -> dict:
    return {
        "id": "msg_1",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": text}],
    }


def gemini_payload(text: str) -> dict:
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


class ProviderStub:
    """Fakes all three external providers behind one ``httpx.MockTransport``.

    Each request is recorded as ``(host, json_body)`` in arrival order.
    Handlers can be replaced per host to simulate failures.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict]] = []
        self.scores: dict[str, float] = {}
        self.handlers: dict[str, Callable[[httpx.Request], httpx.Response]] = {
            WINSTON_HOST: self._winston,
            ANTHROPIC_HOST: self._anthropic,
            GEMINI_HOST: self._gemini,
        }

    def _winston(self, request: httpx.Request) -> httpx.Response:
        text = json.loads(request.content)["text"]
        return httpx.Response(200, json=detection_payload(text, self.scores.get(text, 82.5)))

    def _anthropic(self, request: httpx.Request) -> httpx.Response:
        prompt = json.loads(request.content)["messages"][0]["content"][0]["text"]
        source = prompt.rsplit("Text: ", 1)[-1]
        return httpx.Response(200, json=anthropic_payload(f"claude({source})"))

    def _gemini(self, request: httpx.Request) -> httpx.Response:
        prompt = json.loads(request.content)["contents"][0]["parts"][0]["text"]
        source = prompt.rsplit("Text: ", 1)[-1]
        return httpx.Response(200, json=gemini_payload(f"gemini({source})"))

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append((request.url.host, json.loads(request.content)))
        return self.handlers[request.url.host](request)

    def hosts(self) -> list[str]:
        return [host for host, _ in self.calls]

    def bodies(self, host: str) -> list[dict]:
        return [body for call_host, body in self.calls if call_host == host]


