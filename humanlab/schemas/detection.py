from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

from humanlab.utils.text import clamp


def ai_probability_of(score: float) -> float:
    """The provider scores human-likeness; the displayed AI probability is its complement."""
    return round(clamp(100.0 - score, 0.0, 100.0), 2)


class SentenceScore(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    text: str
    score: float
    length: int | None = None

    @computed_field
    @property
    def ai_probability(self) -> float:
        return ai_probability_of(self.score)


class DetectionResult(BaseModel):
    """Normalized detection provider response.

    Field names follow the provider payload so the JSON served by the API has
    the same shape the provider returned.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    status: int | None = None
    score: float = Field(ge=0.0, le=100.0)
    length: int = 0
    sentences: list[SentenceScore] = Field(default_factory=list)
    readability_score: float = 0.0
    input: str | None = None
    credits_used: int | None = None
    credits_remaining: int | None = None
    version: str | None = None
    language: str | None = None

    @computed_field
    @property
    def ai_probability(self) -> float:
        return ai_probability_of(self.score)

    @classmethod
    def from_provider(cls, payload: dict[str, Any]) -> "DetectionResult":
        return cls.model_validate(payload)


class AnalyzeRequest(BaseModel):
    text: str = ""


class AnalyzeResponse(BaseModel):
    data: DetectionResult
