"""HTTP route definitions for the service."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from app.schemas import EvaluationRequest, EvaluationResponse
from services.errors import LogEvaluationError
from services.log_evaluator import LogEvaluator, build_default_evaluator
from settings import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


def get_evaluator() -> LogEvaluator:
    return build_default_evaluator()


def get_app_settings() -> Settings:
    return get_settings()


def _run_evaluation(evaluator: LogEvaluator, text: str) -> EvaluationResponse:
    start_time = time.perf_counter()
    try:
        results = evaluator.evaluate_log(text)
    except LogEvaluationError as exc:
        logger.warning(
            "Rejected sensor log",
            extra={"reason": exc.reason, "sensor_name": exc.sensor_name},
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    processing_ms = int((time.perf_counter() - start_time) * 1000)
    logger.info(
        "Served sensor log evaluation",
        extra={"sensor_count": len(results), "processing_ms": processing_ms},
    )
    return EvaluationResponse(
        results=results.to_dict(),
        sensor_count=len(results),
        processing_ms=processing_ms,
    )


@router.post(
    "/evaluations",
    response_model=EvaluationResponse,
    summary="Evaluate a sensor log submitted as JSON.",
)
async def evaluate_inline(
    payload: EvaluationRequest,
    evaluator: LogEvaluator = Depends(get_evaluator),
    settings: Settings = Depends(get_app_settings),
) -> EvaluationResponse:
    if len(payload.log.encode(settings.log_encoding, errors="replace")) > settings.max_log_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Log exceeds the {settings.max_log_bytes} byte limit.",
        )
    return _run_evaluation(evaluator, payload.log)


@router.post(
    "/evaluations/file",
    response_model=EvaluationResponse,
    summary="Evaluate an uploaded sensor log file.",
)
async def evaluate_file(
    file: UploadFile = File(..., description="Text log of sensor readings."),
    evaluator: LogEvaluator = Depends(get_evaluator),
    settings: Settings = Depends(get_app_settings),
) -> EvaluationResponse:
    try:
        contents = await file.read(settings.max_log_bytes + 1)
    finally:
        await file.close()

    if not contents:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file is empty.",
        )
    if len(contents) > settings.max_log_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Log exceeds the {settings.max_log_bytes} byte limit.",
        )

    try:
        text = contents.decode(settings.log_encoding)
    except UnicodeDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Uploaded file is not valid {settings.log_encoding} text.",
        ) from exc

    return _run_evaluation(evaluator, text)


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "POST a sensor log to /evaluations."}
