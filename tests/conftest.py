from __future__ import annotations

import httpx
import pytest

from helpers import ProviderStub
from humanlab.core.config import Settings
from humanlab.services.detection import DetectionClient
from humanlab.services.orchestrator import HumanizationOrchestrator
from humanlab.services.providers import AnthropicRewriter, GeminiRewriter


@pytest.fixture
def settings() -> Settings:
    return Settings(
        WINSTON_API_KEY="winston-test-key",
        ANTHROPIC_API_KEY="anthropic-test-key",
        GEMINI_API_KEY="gemini-test-key",
        ANTHROPIC_SYSTEM_PROMPT="",
        ANTHROPIC_USER_PROMPT="",
        GEMINI_SYSTEM_PROMPT="",
        GEMINI_USER_PROMPT="",
    )


@pytest.fixture
def stub() -> ProviderStub:
    return ProviderStub()


@pytest.fixture
def http_client(stub: ProviderStub) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(stub.handle))


@pytest.fixture
def detector(settings: Settings, http_client: httpx.AsyncClient) -> DetectionClient:
    return DetectionClient(settings=settings, client=http_client)


@pytest.fixture
def orchestrator(settings: Settings, http_client: httpx.AsyncClient, detector: DetectionClient) -> HumanizationOrchestrator:
    return HumanizationOrchestrator(
        detector=detector,
        anthropic=AnthropicRewriter(settings=settings, client=http_client),
        gemini=GeminiRewriter(settings=settings, client=http_client),
    )
