"""Pydantic schemas for request/response validation."""

from .response import ApiResponse, PageResponse
from .student import StudentRequest, StudentResponse

__all__ = [
    "ApiResponse",
    "PageResponse",
    "StudentRequest",
    "StudentResponse",
]
