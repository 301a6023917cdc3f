from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from dynamo_autoscale.commons.depends import logger_handle
from dynamo_autoscale.commons.logging import LoggerHandle
from dynamo_autoscale.health.schemas import HealthResponse
from dynamo_autoscale.health.service import HealthService

router = APIRouter()


def health_service(log: Annotated[LoggerHandle, Depends(logger_handle)]) -> HealthService:
    return HealthService(log)


@router.get("/health", response_model=HealthResponse)
async def health(
    service: Annotated[HealthService, Depends(health_service)],
) -> HealthResponse:
    return HealthResponse(**service.payload())
