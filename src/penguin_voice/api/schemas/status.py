"""Response schemas for status endpoints."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Health-check payload."""

    model_config = ConfigDict(populate_by_name=True)

    uptime: float = Field(..., description="Process uptime in seconds")
    connection_count: int = Field(..., alias="connectionCount")
    address: str
    name: Optional[str] = None
