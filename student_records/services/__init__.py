"""Service layer."""

from .student import StudentService

__all__ = ["StudentService"]
