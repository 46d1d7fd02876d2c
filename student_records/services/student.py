"""Business logic for student records and their photos."""

import logging
from typing import List, Optional

from config import Settings, get_settings
from student_records.exceptions import ResourceNotFoundError, ValidationError
from student_records.imaging import decode_photo, encode_photo
from student_records.models.db import Student
from student_records.repositories import StudentRepository
from student_records.schemas import PageResponse, StudentRequest, StudentResponse

logger = logging.getLogger(__name__)


class StudentService:
    """Student CRUD on top of a StudentRepository.

    Photos arrive as Base64 text and are stored as raw bytes. On every read
    the stored bytes are resized and re-encoded into the response; the
    stored record itself is never modified by a read.
    """

    def __init__(self, repository: StudentRepository, settings: Optional[Settings] = None):
        self.repository = repository
        self.settings = settings or get_settings()

    def list_students(self, name: Optional[str] = None) -> List[StudentResponse]:
        """List all students, optionally filtered by a name substring."""
        logger.debug(f"Listing students (name={name!r})")
        return [self._to_response(s) for s in self.repository.list_students(name=name)]

    def list_students_page(
        self,
        page: int,
        size: int,
        name: Optional[str] = None,
    ) -> PageResponse[StudentResponse]:
        """Get one 0-based page of students ordered by id."""
        logger.debug(f"Listing students page={page}, size={size}, name={name!r}")
        if page < 0:
            raise ValidationError(errors={"page": "Page index must not be negative"})
        if size < 1:
            raise ValidationError(errors={"size": "Page size must be at least 1"})

        total = self.repository.count(name=name)
        students = self.repository.list_students(name=name, limit=size, offset=page * size)
        return PageResponse[StudentResponse].build(
            content=[self._to_response(s) for s in students],
            page=page,
            size=size,
            total=total,
        )

    def get_student(self, student_id: int) -> StudentResponse:
        """Get a student by id.

        Raises:
            ResourceNotFoundError: If the student does not exist.
        """
        logger.debug(f"Getting student by id: {student_id}")
        return self._to_response(self._require(student_id))

    def create_student(self, request: StudentRequest) -> StudentResponse:
        """Create a student, storing its photo if one was sent.

        Raises:
            ValidationError: If a required field is missing or blank.
        """
        logger.debug(f"Creating student: {request.name!r}")
        self._validate(request)

        student = self.repository.add(
            name=request.name,
            birth_date=request.birth_date,
            mobile_no=request.mobile_no,
            photo=self._decode_request_photo(request),
        )
        logger.info(f"Student saved successfully with id: {student.id}")
        return self._to_response(student)

    def update_student(self, student_id: int, request: StudentRequest) -> StudentResponse:
        """Update a student.

        The photo is only replaced when the request carries a decodable
        one; otherwise the stored photo is kept.

        Raises:
            ValidationError: If a required field is missing or blank.
            ResourceNotFoundError: If the student does not exist.
        """
        logger.debug(f"Updating student with id: {student_id}")
        self._validate(request)

        student = self.repository.update(
            student_id,
            name=request.name,
            birth_date=request.birth_date,
            mobile_no=request.mobile_no,
            photo=self._decode_request_photo(request),
        )
        if student is None:
            raise ResourceNotFoundError("Student", "id", student_id)

        logger.info(f"Student updated successfully with id: {student_id}")
        return self._to_response(student)

    def delete_student(self, student_id: int) -> None:
        """Delete a student and its photo.

        Raises:
            ResourceNotFoundError: If the student does not exist.
        """
        logger.debug(f"Deleting student with id: {student_id}")
        if not self.repository.delete(student_id):
            raise ResourceNotFoundError("Student", "id", student_id)
        logger.info(f"Student deleted successfully with id: {student_id}")

    def _require(self, student_id: int) -> Student:
        student = self.repository.get(student_id)
        if student is None:
            raise ResourceNotFoundError("Student", "id", student_id)
        return student

    def _decode_request_photo(self, request: StudentRequest) -> Optional[bytes]:
        # Undecodable text yields None, so an update keeps the stored photo
        # instead of clearing it.
        photo = decode_photo(request.photo_base64)
        if photo is not None and len(photo) > self.settings.max_photo_size:
            raise ValidationError(
                errors={
                    "photoBase64": f"Photo exceeds maximum size of "
                                   f"{self.settings.max_photo_size} bytes"
                }
            )
        return photo

    def _validate(self, request: StudentRequest) -> None:
        error = ValidationError()

        if not request.name or not request.name.strip():
            error.add_error("name", "Name cannot be empty")
        if request.birth_date is None:
            error.add_error("birthDate", "Birth date cannot be empty")
        if not request.mobile_no or not request.mobile_no.strip():
            error.add_error("mobileNo", "Mobile number cannot be empty")

        if error.errors:
            raise error

    def _to_response(self, student: Student) -> StudentResponse:
        max_width, max_height = self.settings.photo_bounds
        return StudentResponse(
            id=student.id,
            name=student.name,
            birth_date=student.birth_date,
            mobile_no=student.mobile_no,
            photo_base64=encode_photo(
                student.photo,
                max_width=max_width,
                max_height=max_height,
                output_format=self.settings.photo_format,
            ),
        )
