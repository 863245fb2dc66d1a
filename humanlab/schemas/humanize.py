from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from humanlab.core.errors import HUMANIZE_FAILED_MESSAGE
from humanlab.schemas.detection import DetectionResult


class HumanizeMode(str, Enum):
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    BOTH = "both"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PromptOverrides(_CamelModel):
    anthropic_system: str | None = None
    anthropic_user: str | None = None
    gemini_system: str | None = None
    gemini_user: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ResolvedPrompts(PromptOverrides):
    """Caller overrides echoed back with the final user prompts actually sent."""

    final_anthropic_prompt: str | None = None
    final_gemini_prompt: str | None = None


class HumanizeRequest(_CamelModel):
    text: str = ""
    mode: HumanizeMode = Field(
        default=HumanizeMode.GEMINI,
        validation_alias=AliasChoices("type", "mode"),
        serialization_alias="type",
    )
    prompts: PromptOverrides | None = None

    @field_validator("mode", mode="before")
    @classmethod
    def null_mode_is_gemini(cls, value: object) -> object:
        return HumanizeMode.GEMINI if value is None else value


class HumanizeResult(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    original: DetectionResult | None = None
    humanized: DetectionResult | None = None
    humanized_text: str = ""
    prompts: ResolvedPrompts | None = None
    mode: HumanizeMode | None = Field(default=None, alias="type")
    error: str | None = None

    @model_validator(mode="after")
    def error_excludes_results(self) -> "HumanizeResult":
        if self.error is not None and (
            self.original is not None
            or self.humanized is not None
            or self.humanized_text
            or self.prompts is not None
            or self.mode is not None
        ):
            raise ValueError("an errored result cannot carry partial results")
        return self

    @classmethod
    def failure(cls, message: str = HUMANIZE_FAILED_MESSAGE) -> "HumanizeResult":
        return cls(humanized_text="", error=message)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
