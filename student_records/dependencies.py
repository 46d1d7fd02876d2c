"""FastAPI dependency injection configuration."""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from student_records.db import get_db
from student_records.repositories import (
    InMemoryStudentRepository,
    StudentDBRepository,
    StudentRepository,
)
from student_records.services import StudentService
from config import get_settings

logger = logging.getLogger(__name__)


# Global instance for in-memory repository
_in_memory_repository: InMemoryStudentRepository | None = None


def get_student_repository(db: Session = Depends(get_db)) -> StudentRepository:
    """Get the student repository selected by configuration.

    - "database": StudentDBRepository bound to the request's session
    - "memory": a process-wide InMemoryStudentRepository (lost on restart)

    Args:
        db: Database session (only used for the database backend)

    Returns:
        StudentRepository: The configured repository instance
    """
    settings = get_settings()

    if settings.repository_backend == "database":
        return StudentDBRepository(db)

    global _in_memory_repository
    if _in_memory_repository is None:
        _in_memory_repository = InMemoryStudentRepository()
        logger.info(
            f"Created in-memory student repository "
            f"(repository_backend={settings.repository_backend})"
        )
    return _in_memory_repository


def get_student_service(
    repository: StudentRepository = Depends(get_student_repository),
) -> StudentService:
    """Get a StudentService for the current request."""
    return StudentService(repository, get_settings())
