from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import ORJSONResponse
from pydantic import ValidationError

from humanlab.core.errors import EMPTY_TEXT_MESSAGE, HUMANIZE_FAILED_MESSAGE
from humanlab.core.logging import get_logger
from humanlab.schemas.humanize import HumanizeRequest, HumanizeResult
from humanlab.services.orchestrator import HumanizationOrchestrator, get_orchestrator
from humanlab.utils.request_body import read_json_body
from humanlab.utils.text import is_blank

router = APIRouter()
logger = get_logger(__name__)


def _failed() -> ORJSONResponse:
    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=HumanizeResult.failure(HUMANIZE_FAILED_MESSAGE).to_payload(),
    )


@router.post("/humanize")
async def humanize_content(
    request: Request,
    orchestrator: HumanizationOrchestrator = Depends(get_orchestrator),
):
    try:
        payload = await read_json_body(request)
    except HTTPException as exc:
        logger.warning("humanize_body_unreadable", detail=exc.detail)
        return _failed()

    if is_blank(payload.get("text")):
        return ORJSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": EMPTY_TEXT_MESSAGE})

    try:
        body = HumanizeRequest.model_validate(payload)
    except ValidationError as exc:
        logger.warning("humanize_request_invalid", errors=exc.error_count())
        return _failed()

    result = await orchestrator.humanize(body)
    if not result.ok:
        return _failed()
    return ORJSONResponse(content=result.to_payload())
