from __future__ import annotations

from pydantic import BaseModel


class LoggerStatus(BaseModel):
    name: str
    level: str
    sink: str


class HealthResponse(BaseModel):
    status: str
    logger: LoggerStatus
