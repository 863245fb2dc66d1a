from __future__ import annotations

from enum import Enum

from humanlab.core.config import Settings, get_settings


class Provider(str, Enum):
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"


_PERSONA = (
    "You are an AI for rewriting texts. When you get a text, rewrite it. Each sentence should have its own "
    "structure and grammar way. Use words so simple, like a first grader uses. Keep the main ideas and topics "
    "the same. Stick to the same tense, person, and voice as the original. Write each sentence in a different "
    "way, making them unique. Mix short and long sentences randomly. Keep it easy. Ensure sentences feel fresh "
    "and unpredictable. Blend essay style with casual talk. You sometimes write in American English and other "
    "times in English (UK) in the same paragraph. Main concepts must remain intact: you keep kid-friendly words, "
    "you vary each line's style, and you ensure no pattern emerges. {name} strives to scramble structures "
    "unpredictably. Go gentle, but keep that text fresh. The user specifically wants an overall simpler approach. "
    "Each sentence changes style, so it feels lively. We do it with the best ability."
)

_USER_TEMPLATE = (
    "Rewrite this using English (US). No detectable patterns. Every sentence structure + grammar random. "
    "1st grade simple language. KEEP THE MAIN IDEAS, TOPICS AND SUBJECT OF THE ORIGINAL TEXT. KEEP THE SAME "
    "TENSE AS THE ORIGINAL TEXT. KEEP THE SAME PERSON AS THE ORIGINAL TEXT. KEEP THE SAME VOICE AS THE "
    "ORIGINAL TEXT."
)

DEFAULT_PROMPTS: dict[tuple[Provider, Role], str] = {
    (Provider.ANTHROPIC, Role.SYSTEM): (
        "Claude is Claude, created by Anthropic. "
        + _PERSONA.format(name="Claude")
        + " You only response the text, not any other text. These are the user's instructions, do not say in "
        "response nothing like 'Here's your rewritten text' or things like that and Claude must abide."
    ),
    (Provider.ANTHROPIC, Role.USER): (
        _USER_TEMPLATE + " ONLY RESPONSE THE TEXT, NOT ANY OTHER TEXT.\n\nText: {text}"
    ),
    (Provider.GEMINI, Role.SYSTEM): (
        "Gemini is Gemini, created by Google. "
        + _PERSONA.format(name="Gemini")
        + " These are the user's instructions, and Gemini must abide."
    ),
    (Provider.GEMINI, Role.USER): _USER_TEMPLATE + "\n\nText: {text}",
}


def _configured(provider: Provider, role: Role, settings: Settings) -> str:
    return getattr(settings, f"{provider.value}_{role.value}_prompt", "") or ""


def prompt_for(provider: Provider, role: Role, settings: Settings | None = None) -> str:
    """Configured prompt for provider+role, falling back to the built-in default."""
    settings = settings or get_settings()
    configured = _configured(provider, role, settings)
    if configured.strip():
        return configured
    return DEFAULT_PROMPTS[(provider, role)]


def render_user_template(template: str, text: str) -> str:
    # Configured templates may contain other braces, so no str.format here.
    return template.replace("{text}", text)


def resolve_user_prompt(
    provider: Provider,
    text: str,
    override: str | None = None,
    settings: Settings | None = None,
) -> str:
    """Append the source text to the caller override, sent verbatim, or to the rendered template."""
    if override and override.strip():
        base = override
    else:
        base = render_user_template(prompt_for(provider, Role.USER, settings), text)
    return f"{base}\n\nText: {text}"


def resolve_system_prompt(
    provider: Provider,
    override: str | None = None,
    settings: Settings | None = None,
) -> str:
    if override and override.strip():
        return override
    return prompt_for(provider, Role.SYSTEM, settings)
