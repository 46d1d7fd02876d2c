"""Response envelope and page schemas shared by every endpoint."""

import math
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform wrapper around every API response body."""

    success: bool = Field(
        ...,
        description="Whether the operation succeeded"
    )

    message: str = Field(
        ...,
        description="Human-readable outcome of the operation",
        examples=["Students retrieved successfully", "Student not found with id: '7'"]
    )

    data: Optional[T] = Field(
        None,
        description="Operation payload; null on errors and deletes"
    )

    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="Server time the response was built"
    )

    @classmethod
    def ok(cls, data: Optional[T] = None, message: str = "Operation successful") -> "ApiResponse[T]":
        return cls(success=True, message=message, data=data)

    @classmethod
    def error(cls, message: str, data: Optional[T] = None) -> "ApiResponse[T]":
        return cls(success=False, message=message, data=data)


class PageResponse(BaseModel, Generic[T]):
    """One page of results.

    Pages are 0-based, matching the ``page`` query parameter.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "content": [],
                    "currentPage": 0,
                    "totalPages": 3,
                    "totalItems": 12,
                    "pageSize": 5
                }
            ]
        }
    )

    content: List[T] = Field(
        ...,
        description="Items on this page"
    )

    current_page: int = Field(
        ...,
        alias="currentPage",
        ge=0,
        description="0-based index of this page"
    )

    total_pages: int = Field(
        ...,
        alias="totalPages",
        ge=0,
        description="Number of pages available at this page size"
    )

    total_items: int = Field(
        ...,
        alias="totalItems",
        ge=0,
        description="Number of items across all pages"
    )

    page_size: int = Field(
        ...,
        alias="pageSize",
        ge=1,
        description="Requested page size"
    )

    @classmethod
    def build(cls, content: List[T], page: int, size: int, total: int) -> "PageResponse[T]":
        """Build a page from its items and the total item count."""
        return cls(
            content=content,
            current_page=page,
            total_pages=math.ceil(total / size) if size else 0,
            total_items=total,
            page_size=size,
        )
