"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field


class EvaluationRequest(BaseModel):
    """Sensor log submitted inline as JSON."""

    log: str = Field(..., description="Full log text, starting with the reference line.")


class EvaluationResponse(BaseModel):
    """Verdicts computed for every sensor found in a log."""

    results: Dict[str, str] = Field(
        default_factory=dict, description="Sensor name mapped to its verdict."
    )
    sensor_count: int = Field(..., ge=0)
    processing_ms: Optional[int] = Field(
        default=None, description="Duration in milliseconds spent evaluating the log."
    )
