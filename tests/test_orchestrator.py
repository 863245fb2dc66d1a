import asyncio

import httpx
import pytest

from helpers import ANTHROPIC_HOST, GEMINI_HOST, SAMPLE_TEXT, WINSTON_HOST
from humanlab.core.errors import TextValidationError
from humanlab.schemas.humanize import HumanizeMode, HumanizeRequest, HumanizeResult, PromptOverrides


def _assert_failed(result: HumanizeResult) -> None:
    assert result.error == "Failed to humanize text"
    assert result.humanized_text == ""
    assert result.original is None
    assert result.humanized is None
    assert result.prompts is None
    assert result.mode is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("mode", "provider_host", "expected_text"),
    [
        (HumanizeMode.ANTHROPIC, ANTHROPIC_HOST, f"claude({SAMPLE_TEXT})"),
        (HumanizeMode.GEMINI, GEMINI_HOST, f"gemini({SAMPLE_TEXT})"),
    ],
)
async def test_single_provider_success(orchestrator, stub, mode, provider_host, expected_text):
    stub.scores[expected_text] = 64.0

    result = await orchestrator.humanize(HumanizeRequest(text=SAMPLE_TEXT, mode=mode))

    assert result.ok
    assert result.humanized_text == expected_text
    assert result.original.score == 82.5
    assert result.humanized.score == 64.0
    assert result.mode is mode
    assert stub.hosts()[0] == provider_host
    assert sorted(stub.hosts()[1:]) == [WINSTON_HOST, WINSTON_HOST]
    assert sorted(body["text"] for body in stub.bodies(WINSTON_HOST)) == sorted([SAMPLE_TEXT, expected_text])


@pytest.mark.asyncio
async def test_chained_runs_gemini_then_anthropic_on_its_output(orchestrator, stub):
    result = await orchestrator.humanize(HumanizeRequest(text=SAMPLE_TEXT, mode=HumanizeMode.BOTH))

    assert stub.hosts()[:2] == [GEMINI_HOST, ANTHROPIC_HOST]
    [anthropic_body] = stub.bodies(ANTHROPIC_HOST)
    anthropic_prompt = anthropic_body["messages"][0]["content"][0]["text"]
    assert anthropic_prompt.endswith(f"\n\nText: gemini({SAMPLE_TEXT})")
    assert result.humanized_text == f"claude(gemini({SAMPLE_TEXT}))"


@pytest.mark.asyncio
async def test_resolved_prompts_are_recorded(orchestrator):
    request = HumanizeRequest(
        text=SAMPLE_TEXT,
        mode=HumanizeMode.BOTH,
        prompts=PromptOverrides(gemini_user="Make it plain."),
    )

    result = await orchestrator.humanize(request)

    assert result.prompts.gemini_user == "Make it plain."
    assert result.prompts.final_gemini_prompt == f"Make it plain.\n\nText: {SAMPLE_TEXT}"
    assert result.prompts.final_anthropic_prompt.endswith(f"Text: gemini({SAMPLE_TEXT})")


@pytest.mark.asyncio
async def test_single_mode_records_only_the_invoked_provider(orchestrator):
    result = await orchestrator.humanize(HumanizeRequest(text=SAMPLE_TEXT, mode=HumanizeMode.GEMINI))

    assert result.prompts.final_gemini_prompt is not None
    assert result.prompts.final_anthropic_prompt is None


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "    ", "\n"])
async def test_blank_text_is_rejected_without_network(orchestrator, stub, text):
    with pytest.raises(TextValidationError):
        await orchestrator.humanize(HumanizeRequest(text=text))

    assert stub.calls == []


@pytest.mark.asyncio
async def test_provider_timeout_fails_whole_request(orchestrator, stub):
    def timeout(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    stub.handlers[GEMINI_HOST] = timeout

    result = await orchestrator.humanize(HumanizeRequest(text=SAMPLE_TEXT, mode=HumanizeMode.BOTH))

    _assert_failed(result)
    assert stub.hosts() == [GEMINI_HOST]


@pytest.mark.asyncio
async def test_no_fallback_to_other_provider(orchestrator, stub):
    stub.handlers[ANTHROPIC_HOST] = lambda request: httpx.Response(500, json={"error": {"message": "boom"}})

    result = await orchestrator.humanize(HumanizeRequest(text=SAMPLE_TEXT, mode=HumanizeMode.ANTHROPIC))

    _assert_failed(result)
    assert GEMINI_HOST not in stub.hosts()


@pytest.mark.asyncio
async def test_detection_failure_discards_rewrite(orchestrator, stub):
    stub.handlers[WINSTON_HOST] = lambda request: httpx.Response(
        401, json={"error": "UNAUTHORIZED", "description": "Invalid API key"}
    )

    result = await orchestrator.humanize(HumanizeRequest(text=SAMPLE_TEXT, mode=HumanizeMode.GEMINI))

    _assert_failed(result)


@pytest.mark.asyncio
async def test_unexpected_exception_is_contained(orchestrator, monkeypatch):
    async def explode(*args, **kwargs):
        raise KeyError("surprise")

    monkeypatch.setattr(orchestrator.gemini, "rewrite", explode)

    result = await orchestrator.humanize(HumanizeRequest(text=SAMPLE_TEXT, mode=HumanizeMode.GEMINI))

    _assert_failed(result)


def test_errored_result_cannot_carry_partial_fields():
    with pytest.raises(ValueError):
        HumanizeResult(humanized_text="something", error="Failed to humanize text")


@pytest.mark.asyncio
async def test_failed_detection_waits_for_the_other(orchestrator, monkeypatch):
    finished = []

    async def detect(text):
        if text == SAMPLE_TEXT:
            raise httpx.ConnectError("refused")
        await asyncio.sleep(0.01)
        finished.append(text)

    monkeypatch.setattr(orchestrator.detector, "detect", detect)

    result = await orchestrator.humanize(HumanizeRequest(text=SAMPLE_TEXT, mode=HumanizeMode.GEMINI))

    _assert_failed(result)
    assert finished == [f"gemini({SAMPLE_TEXT})"]


@pytest.mark.asyncio
async def test_caller_prompt_braces_survive_into_recorded_prompt(orchestrator):
    request = HumanizeRequest(
        text=SAMPLE_TEXT,
        mode=HumanizeMode.GEMINI,
        prompts=PromptOverrides(gemini_user="Keep {text} literal."),
    )

    result = await orchestrator.humanize(request)

    assert result.prompts.final_gemini_prompt == f"Keep {{text}} literal.\n\nText: {SAMPLE_TEXT}"
