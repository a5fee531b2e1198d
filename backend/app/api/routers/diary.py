"""Diary duplication webhook."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ...api.dependencies import get_clock, get_gateway_factory, get_metrics, get_settings
from ...config import Settings
from ...domain.diary.errors import BLOCKS_UNAVAILABLE, DiaryDuplicationError
from ...domain.diary.gateway import GatewayFactory
from ...domain.diary.service import Clock, DiaryDuplicationService
from ...infra.logging import get_logger
from ...infra.metrics import MetricsClient

router = APIRouter(tags=["diary"])
logger = get_logger(__name__)

ALREADY_EXISTS_MESSAGE = "Diary entry for today already exists."
DUPLICATED_MESSAGE = "Diary entry duplicated successfully."
BLOCKS_UNAVAILABLE_MESSAGE = "Could not retrieve blocks"
INTERNAL_ERROR_MESSAGE = "Internal server error"


class DuplicationMessage(BaseModel):
    success: Optional[bool] = None
    message: str


class ErrorBody(BaseModel):
    error: str


@router.post("/duplicate-diary")
def duplicate_diary(
    settings: Settings = Depends(get_settings),
    gateway_factory: GatewayFactory = Depends(get_gateway_factory),
    clock: Clock = Depends(get_clock),
    metrics: MetricsClient = Depends(get_metrics),
) -> JSONResponse:
    service = DiaryDuplicationService(
        settings, gateway_factory=gateway_factory, clock=clock, metrics=metrics
    )
    try:
        outcome = service.duplicate()
    except DiaryDuplicationError as exc:
        message = BLOCKS_UNAVAILABLE_MESSAGE if exc.code == BLOCKS_UNAVAILABLE else str(exc)
        return _error_response(message)
    except Exception as exc:
        logger.exception("diary_webhook_unexpected_error")
        return _error_response(str(exc) or INTERNAL_ERROR_MESSAGE)

    if outcome.status == "exists":
        body = DuplicationMessage(message=ALREADY_EXISTS_MESSAGE)
    else:
        logger.info(
            "diary_webhook_created",
            extra={"page_id": outcome.created_entry_id},
        )
        body = DuplicationMessage(success=True, message=DUPLICATED_MESSAGE)
    return JSONResponse(
        status_code=status.HTTP_200_OK, content=body.model_dump(exclude_none=True)
    )


def _error_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorBody(error=message).model_dump(),
    )
