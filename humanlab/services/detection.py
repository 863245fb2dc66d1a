from __future__ import annotations

import httpx
from pydantic import ValidationError

from humanlab.core.config import Settings, get_settings
from humanlab.core.errors import DETECTION_FAILED_MESSAGE, UNEXPECTED_ERROR_MESSAGE, DetectionError
from humanlab.core.logging import get_logger
from humanlab.schemas.detection import DetectionResult
from humanlab.services.http import client_scope, json_object
from humanlab.utils.text import require_text

logger = get_logger(__name__)


class DetectionClient:
    """Scores text with the external AI-content-detection provider.

    One request per call, no retries. Failures raise ``DetectionError`` carrying
    the provider's ``description`` when it sent one.
    """

    def __init__(self, settings: Settings | None = None, client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings or get_settings()
        self.client = client

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.winston_api_key.get_secret_value()}",
            "Content-Type": "application/json",
        }

    def _body(self, text: str) -> dict:
        return {
            "text": text,
            "version": self.settings.detection_version,
            "sentences": True,
            "language": self.settings.detection_language,
        }

    async def detect(self, text: str) -> DetectionResult:
        text = require_text(text)
        if len(text) < self.settings.detection_min_chars:
            logger.warning(
                "detection_text_below_recommended_length",
                length=len(text),
                recommended=self.settings.detection_min_chars,
            )

        try:
            async with client_scope(self.client, self.settings.http_timeout_seconds) as client:
                response = await client.post(
                    self.settings.winston_api_url,
                    json=self._body(text),
                    headers=self._headers(),
                )
        except httpx.HTTPError as exc:
            logger.warning("detection_transport_failed", error=type(exc).__name__)
            raise DetectionError(UNEXPECTED_ERROR_MESSAGE) from exc

        payload = json_object(response)
        if response.is_error:
            description = (payload or {}).get("description")
            logger.warning(
                "detection_provider_error",
                status_code=response.status_code,
                provider_error=(payload or {}).get("error"),
            )
            message = description if isinstance(description, str) and description else DETECTION_FAILED_MESSAGE
            raise DetectionError(message, status_code=response.status_code)

        if payload is None:
            logger.warning("detection_unparseable_response", status_code=response.status_code)
            raise DetectionError(UNEXPECTED_ERROR_MESSAGE)

        try:
            result = DetectionResult.from_provider(payload)
        except ValidationError as exc:
            logger.warning("detection_invalid_payload", errors=exc.error_count())
            raise DetectionError(UNEXPECTED_ERROR_MESSAGE) from exc

        logger.info(
            "detection_completed",
            length=result.length,
            score=result.score,
            sentences=len(result.sentences),
            credits_remaining=result.credits_remaining,
        )
        return result


def get_detection_client() -> DetectionClient:
    return DetectionClient()
