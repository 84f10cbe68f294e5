from __future__ import annotations

from typing import Literal
from pydantic import BaseModel, ConfigDict, Field


class ProcessInfo(BaseModel):
    activation: str | None = Field(default=None, description="Serverless activation id")


class ProbeFailure(BaseModel):
    url: str
    statuscode: int = 500
    body: str | None = None


class StatusReport(BaseModel):
    status: Literal["OK", "failed"]
    version: str
    response_time: int = Field(ge=0, description="Elapsed milliseconds for the whole report")
    error: ProbeFailure | None = None
    process: ProcessInfo = Field(default_factory=ProcessInfo)
    # per-check timings are stored as extra top-level fields
    model_config = ConfigDict(extra="allow")

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)


class StatusResponse(BaseModel):
    statusCode: int
    headers: dict[str, str]
    body: str


class HealthResponse(BaseModel):
    status: str = Field(description="Health status")
