"""
Blog API - Shared Schemas
=========================

What:  Base model with the wire naming convention, the pagination wrapper,
       the error envelope and the health response.
"""

import math
from datetime import datetime
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from blogapi.database import BIGINT_MAX

T = TypeVar("T")

MAX_PAGE_SIZE = 100
# Keeps page * size (the query offset) inside a signed 64-bit integer
MAX_PAGE = BIGINT_MAX // MAX_PAGE_SIZE


class ApiModel(BaseModel):
    """
    Base for every request/response body.

    Python attributes are snake_case; JSON keys are camelCase
    (`author_id` ↔ `authorId`). Either spelling is accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def require_text(value: str, message: str) -> str:
    """Rejects empty and whitespace-only strings with `message`."""
    if value is None or not value.strip():
        raise ValueError(message)
    return value


class PagedResponse(ApiModel, Generic[T]):
    """
    One page of results plus the metadata a client needs to paginate.

    Pages are zero-based. For N matching items and page size S:
        total_pages = ceil(N / S)
        last        = page >= total_pages - 1
    """

    content: List[T] = Field(description="Items on this page")
    page: int = Field(description="Zero-based page index (echoed)")
    size: int = Field(description="Requested page size (echoed)")
    total_elements: int = Field(description="Number of items across all pages")
    total_pages: int = Field(description="Number of pages available")
    last: bool = Field(description="Whether this page is the last one")

    @classmethod
    def build(cls, content: List[T], page: int, size: int, total_elements: int):
        total_pages = math.ceil(total_elements / size) if size > 0 else 0
        return cls(
            content=content,
            page=page,
            size=size,
            total_elements=total_elements,
            total_pages=total_pages,
            last=page >= total_pages - 1,
        )


class ErrorResponse(BaseModel):
    """
    Uniform error envelope returned by every failing request.

    Example:
        {
            "timestamp": "2024-01-15T12:00:00.000000+00:00",
            "status": 404,
            "error": "Not Found",
            "message": "Post not found",
            "path": "/api/posts/abc"
        }
    """

    timestamp: datetime = Field(description="When the error was produced (UTC)")
    status: int = Field(description="HTTP status code")
    error: str = Field(description="HTTP reason phrase")
    message: str = Field(description="Human-readable description")
    path: str = Field(description="Request path")
    errors: Optional[Dict[str, str]] = Field(
        default=None,
        description="Field → message map for request validation failures",
    )


class HealthResponse(BaseModel):
    """Health check response showing service and store status."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    credential_store: str = Field(description="connected or disconnected")
    content_store: str = Field(description="connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
