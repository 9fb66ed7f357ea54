"""Shared Response Schemas"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema whose JSON keys are camelCase on the wire"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(CamelModel):
    """
    Error envelope returned for every handled failure.

    Example:
        {
            "error": "Forbidden",
            "code": "AUTH_002",
            "errorId": "ERR_1700000000000_k3j9x2a",
            "timestamp": "2024-01-28T10:00:00.000Z"
        }
    """
    error: str
    code: str
    error_id: str
    timestamp: str
    context: Optional[Dict[str, Any]] = None


class Pagination(CamelModel):
    """Pagination metadata"""
    page: int = Field(..., ge=1, description="Current page number")
    limit: int = Field(..., ge=1, le=100, description="Items per page")
    total: int = Field(..., ge=0, description="Total number of items")
    total_pages: int = Field(..., ge=0, description="Total number of pages")
