from __future__ import annotations

import asyncio
import time

from humanlab.core.errors import HUMANIZE_FAILED_MESSAGE
from humanlab.core.logging import get_logger
from humanlab.schemas.humanize import (
    HumanizeMode,
    HumanizeRequest,
    HumanizeResult,
    PromptOverrides,
    ResolvedPrompts,
)
from humanlab.services.detection import DetectionClient
from humanlab.services.providers import AnthropicRewriter, GeminiRewriter
from humanlab.utils.text import require_text

logger = get_logger(__name__)


class HumanizationOrchestrator:
    """Rewrites text with one or both LLM providers, then scores before and after.

    ``both`` always runs Gemini first and feeds its output to Anthropic. Any
    failure after validation yields ``HumanizeResult.failure()``; there is no
    fallback between providers and nothing is retried.
    """

    def __init__(
        self,
        detector: DetectionClient | None = None,
        anthropic: AnthropicRewriter | None = None,
        gemini: GeminiRewriter | None = None,
    ) -> None:
        self.detector = detector or DetectionClient()
        self.anthropic = anthropic or AnthropicRewriter()
        self.gemini = gemini or GeminiRewriter()

    async def _rewrite(
        self,
        text: str,
        mode: HumanizeMode,
        overrides: PromptOverrides,
    ) -> tuple[str, ResolvedPrompts]:
        resolved = overrides.model_dump()

        if mode in (HumanizeMode.GEMINI, HumanizeMode.BOTH):
            outcome = await self.gemini.rewrite(text, overrides.gemini_system, overrides.gemini_user)
            resolved["final_gemini_prompt"] = outcome.user_prompt
            text = outcome.text

        if mode in (HumanizeMode.ANTHROPIC, HumanizeMode.BOTH):
            outcome = await self.anthropic.rewrite(text, overrides.anthropic_system, overrides.anthropic_user)
            resolved["final_anthropic_prompt"] = outcome.user_prompt
            text = outcome.text

        return text, ResolvedPrompts(**resolved)

    async def humanize(self, request: HumanizeRequest) -> HumanizeResult:
        source = require_text(request.text)
        overrides = request.prompts or PromptOverrides()
        start = time.perf_counter()

        try:
            rewritten, prompts = await self._rewrite(source, request.mode, overrides)
            # Both detections settle before the outcome is decided.
            original, humanized = await asyncio.gather(
                self.detector.detect(source),
                self.detector.detect(rewritten),
                return_exceptions=True,
            )
            for outcome in (original, humanized):
                if isinstance(outcome, BaseException):
                    raise outcome
        except Exception:
            logger.exception("humanize_failed", mode=request.mode.value, input_chars=len(source))
            return HumanizeResult.failure(HUMANIZE_FAILED_MESSAGE)

        logger.info(
            "humanize_completed",
            mode=request.mode.value,
            original_score=original.score,
            humanized_score=humanized.score,
            latency_ms=round((time.perf_counter() - start) * 1000, 3),
        )
        return HumanizeResult(
            original=original,
            humanized=humanized,
            humanized_text=rewritten,
            prompts=prompts,
            mode=request.mode,
        )


def get_orchestrator() -> HumanizationOrchestrator:
    return HumanizationOrchestrator()
