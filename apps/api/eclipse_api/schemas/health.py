"""Schemas for health and connectivity probes."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    status: str = "OK"
    message: str
    timestamp: datetime


class DatabaseCheckResponse(StatusResponse):
    collections: list[str] = Field(default_factory=list)
