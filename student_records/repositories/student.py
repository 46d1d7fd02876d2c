"""Student repository for managing student records."""

import datetime
import logging
import threading
from typing import List, Optional, Protocol

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from student_records.models.db import Student

logger = logging.getLogger(__name__)


class StudentRepository(Protocol):
    """Interface for student record storage.

    Photos are opaque bytes owned by the record. Implementations never
    inspect or transform them.
    """

    def add(
        self,
        name: str,
        birth_date: datetime.date,
        mobile_no: str,
        photo: Optional[bytes] = None,
    ) -> Student:
        """Store a new student and return it with its assigned id."""
        ...

    def get(self, student_id: int) -> Optional[Student]:
        """Get a student by id, or None if it does not exist."""
        ...

    def update(
        self,
        student_id: int,
        name: Optional[str] = None,
        birth_date: Optional[datetime.date] = None,
        mobile_no: Optional[str] = None,
        photo: Optional[bytes] = None,
    ) -> Optional[Student]:
        """Update the given fields of a student.

        Arguments left as None keep their stored value, so a photo can be
        replaced but never cleared through this method.

        Returns:
            Optional[Student]: The updated student, or None if not found.
        """
        ...

    def delete(self, student_id: int) -> bool:
        """Delete a student and its photo.

        Returns:
            bool: True if the student was deleted, False if not found.
        """
        ...

    def exists(self, student_id: int) -> bool:
        """Check if a student exists."""
        ...

    def count(self, name: Optional[str] = None) -> int:
        """Count students, optionally only those whose name contains ``name``."""
        ...

    def list_students(
        self,
        name: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Student]:
        """List students ordered by id.

        Args:
            name: Case-insensitive substring the name must contain.
            limit: Maximum number of results to return.
            offset: Number of results to skip.
        """
        ...


def _name_matches(student: Student, name: Optional[str]) -> bool:
    if not name:
        return True
    return name.lower() in (student.name or "").lower()


class InMemoryStudentRepository(StudentRepository):
    """In-memory implementation of StudentRepository.

    Records live in a dictionary keyed by id and are lost on restart.
    One instance is shared by every request thread, so all access goes
    through a lock.
    """

    def __init__(self):
        """Initialize the in-memory repository."""
        self._storage: dict[int, Student] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        logger.info("Initialized InMemoryStudentRepository")

    def add(
        self,
        name: str,
        birth_date: datetime.date,
        mobile_no: str,
        photo: Optional[bytes] = None,
    ) -> Student:
        with self._lock:
            student = Student(
                id=self._next_id,
                name=name,
                birth_date=birth_date,
                mobile_no=mobile_no,
                photo=photo,
            )
            self._storage[student.id] = student
            self._next_id += 1
        logger.debug(f"Added student: {student.id}")
        return student

    def get(self, student_id: int) -> Optional[Student]:
        with self._lock:
            return self._storage.get(student_id)

    def update(
        self,
        student_id: int,
        name: Optional[str] = None,
        birth_date: Optional[datetime.date] = None,
        mobile_no: Optional[str] = None,
        photo: Optional[bytes] = None,
    ) -> Optional[Student]:
        with self._lock:
            student = self._storage.get(student_id)
            if student is None:
                logger.warning(f"Cannot update non-existent student: {student_id}")
                return None

            if name is not None:
                student.name = name
            if birth_date is not None:
                student.birth_date = birth_date
            if mobile_no is not None:
                student.mobile_no = mobile_no
            if photo is not None:
                student.photo = photo

        logger.debug(f"Updated student: {student_id}")
        return student

    def delete(self, student_id: int) -> bool:
        with self._lock:
            if self._storage.pop(student_id, None) is None:
                logger.warning(f"Cannot delete non-existent student: {student_id}")
                return False

        logger.debug(f"Deleted student: {student_id}")
        return True

    def exists(self, student_id: int) -> bool:
        with self._lock:
            return student_id in self._storage

    def count(self, name: Optional[str] = None) -> int:
        with self._lock:
            return sum(1 for s in self._storage.values() if _name_matches(s, name))

    def list_students(
        self,
        name: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Student]:
        with self._lock:
            matches = [
                self._storage[key]
                for key in sorted(self._storage)
                if _name_matches(self._storage[key], name)
            ]
        if limit is None:
            return matches[offset:]
        return matches[offset:offset + limit]

    def clear(self) -> None:
        """Clear all records. Mainly useful for tests."""
        with self._lock:
            self._storage.clear()
            self._next_id = 1
        logger.debug("Cleared all students from repository")


class StudentDBRepository(StudentRepository):
    """SQLAlchemy-based implementation of StudentRepository.

    Each write commits its own transaction and rolls back on failure.
    """

    def __init__(self, db: Session):
        """Initialize the repository with a database session.

        Args:
            db: SQLAlchemy session for database operations
        """
        self.db = db

    def add(
        self,
        name: str,
        birth_date: datetime.date,
        mobile_no: str,
        photo: Optional[bytes] = None,
    ) -> Student:
        try:
            student = Student(
                name=name,
                birth_date=birth_date,
                mobile_no=mobile_no,
                photo=photo,
            )
            self.db.add(student)
            self.db.commit()
            self.db.refresh(student)

            logger.info(f"Created student record: {student.id}")
            return student

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create student: {e}")
            raise

    def get(self, student_id: int) -> Optional[Student]:
        student = self.db.query(Student).filter(Student.id == student_id).first()
        if student is None:
            logger.debug(f"Student not found: {student_id}")
        return student

    def update(
        self,
        student_id: int,
        name: Optional[str] = None,
        birth_date: Optional[datetime.date] = None,
        mobile_no: Optional[str] = None,
        photo: Optional[bytes] = None,
    ) -> Optional[Student]:
        student = self.get(student_id)
        if student is None:
            logger.warning(f"Cannot update non-existent student: {student_id}")
            return None

        try:
            if name is not None:
                student.name = name
            if birth_date is not None:
                student.birth_date = birth_date
            if mobile_no is not None:
                student.mobile_no = mobile_no
            if photo is not None:
                student.photo = photo

            self.db.commit()
            self.db.refresh(student)

            logger.info(f"Updated student: {student_id}")
            return student

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update student {student_id}: {e}")
            raise

    def delete(self, student_id: int) -> bool:
        student = self.get(student_id)
        if student is None:
            logger.warning(f"Cannot delete non-existent student: {student_id}")
            return False

        try:
            self.db.delete(student)
            self.db.commit()
            logger.info(f"Deleted student: {student_id}")
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete student {student_id}: {e}")
            raise

    def exists(self, student_id: int) -> bool:
        return self.db.query(Student).filter(Student.id == student_id).count() > 0

    def count(self, name: Optional[str] = None) -> int:
        return self._filtered(name).count()

    def list_students(
        self,
        name: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Student]:
        query = self._filtered(name).order_by(Student.id).offset(offset)

        if limit is not None:
            query = query.limit(limit)

        students = query.all()
        logger.debug(f"Found {len(students)} students")
        return students

    def _filtered(self, name: Optional[str]) -> Query:
        query = self.db.query(Student)
        if name:
            query = query.filter(
                func.lower(Student.name).contains(name.lower(), autoescape=True)
            )
        return query
