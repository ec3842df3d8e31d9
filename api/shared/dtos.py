"""Shared DTOs for the chat backend API."""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class BaseDTO(BaseModel):
    """Base DTO with common configuration.

    Fields may declare a camelCase ``alias``; responses are rendered by
    alias while code constructs models with the Python field names.
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    def to_response(self) -> Dict[str, Any]:
        """JSON-compatible dict using the public field aliases."""
        return self.model_dump(mode="json", by_alias=True)


class TimestampMixin(BaseModel):
    """Mixin for timestamp fields."""

    created_at: datetime = Field(alias="createdAt", description="Creation timestamp")
    updated_at: Optional[datetime] = Field(
        default=None, alias="updatedAt", description="Last update timestamp"
    )


class HealthCheckResponse(BaseDTO):
    """Health check response DTO."""

    status: str = Field(description="Service status")
