"""Repository implementations for data access."""

from .student import InMemoryStudentRepository, StudentDBRepository, StudentRepository

__all__ = [
    "StudentRepository",
    "InMemoryStudentRepository",
    "StudentDBRepository",
]
