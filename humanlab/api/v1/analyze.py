from __future__ import annotations

import time

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import ORJSONResponse

from humanlab.core.errors import EMPTY_TEXT_MESSAGE, DetectionError
from humanlab.core.logging import get_logger
from humanlab.schemas.detection import AnalyzeResponse
from humanlab.services.detection import DetectionClient, get_detection_client
from humanlab.utils.request_body import read_json_body
from humanlab.utils.text import is_blank

router = APIRouter()
logger = get_logger(__name__)


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_content(
    request: Request,
    detector: DetectionClient = Depends(get_detection_client),
):
    try:
        payload = await read_json_body(request)
    except HTTPException as exc:
        return ORJSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    text = payload.get("text")
    if is_blank(text):
        return ORJSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": EMPTY_TEXT_MESSAGE})

    start = time.perf_counter()
    try:
        result = await detector.detect(text)
    except DetectionError as exc:
        return ORJSONResponse(
            status_code=exc.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": exc.message},
        )

    logger.info("analyze_served", length=len(text), latency_ms=round((time.perf_counter() - start) * 1000, 3))
    return AnalyzeResponse(data=result)
