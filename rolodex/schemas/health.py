"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for the health check endpoint."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    environment: str = Field(description="Current app environment (e.g. dev, prod)")
    database: Literal["connected", "disconnected"] | None = Field(
        default=None,
        description="Database connectivity status when check is performed",
    )
    role_snapshot_version: int | None = Field(
        default=None,
        description="Version of the published role snapshot; null until the first successful refresh",
    )
    handler_allow_list_size: int | None = Field(
        default=None,
        description="Number of allow-listed handlers; null until the allow-list is first loaded",
    )
    refresh_running: bool = Field(default=False, description="Whether the background refresh thread is alive")
