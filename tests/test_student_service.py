"""Tests for StudentService photo handling and validation."""

import base64
import datetime
import io
from unittest.mock import patch

import pytest
from PIL import Image

from config import Settings
from student_records.exceptions import ResourceNotFoundError, ValidationError
from student_records.imaging import read_dimensions
from student_records.repositories import InMemoryStudentRepository
from student_records.schemas import StudentRequest
from student_records.services import StudentService


def create_test_jpeg(width: int, height: int) -> bytes:
    """Create a JPEG test image."""
    img = Image.new("RGB", (width, height), color=(90, 160, 30))
    buffer = io.BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


def make_request(**overrides) -> StudentRequest:
    fields = {
        "name": "Grace Hopper",
        "birthDate": "1996-12-09",
        "mobileNo": "555-0142",
    }
    fields.update(overrides)
    return StudentRequest.model_validate(fields)


@pytest.fixture
def repository():
    return InMemoryStudentRepository()


@pytest.fixture
def service(repository):
    return StudentService(repository, Settings())


class TestCreateStudent:
    """Test student creation."""

    def test_create_without_photo(self, service, repository):
        response = service.create_student(make_request())

        assert response.id == 1
        assert response.name == "Grace Hopper"
        assert response.birth_date == datetime.date(1996, 12, 9)
        assert response.photo_base64 is None
        assert repository.get(1).photo is None

    def test_create_with_empty_photo(self, service, repository):
        response = service.create_student(make_request(photoBase64=""))

        assert response.photo_base64 is None
        assert repository.get(response.id).photo is None

    def test_create_stores_raw_bytes(self, service, repository):
        photo = create_test_jpeg(1000, 500)

        service.create_student(make_request(photoBase64=b64(photo)))

        # Stored exactly as uploaded; resizing only happens on the way out
        assert repository.get(1).photo == photo

    def test_create_returns_resized_photo(self, service):
        response = service.create_student(
            make_request(photoBase64=b64(create_test_jpeg(1000, 500)))
        )

        returned = base64.b64decode(response.photo_base64)
        assert read_dimensions(returned) == (300, 150)

    def test_create_with_malformed_photo_saves_without_photo(self, service, repository):
        response = service.create_student(make_request(photoBase64="%%% not base64 %%%"))

        assert response.photo_base64 is None
        assert repository.get(response.id).photo is None

    def test_create_with_undecodable_image_keeps_bytes(self, service, repository):
        response = service.create_student(make_request(photoBase64=b64(b"abcde")))

        assert repository.get(response.id).photo == b"abcde"
        assert response.photo_base64 == b64(b"abcde")

    def test_photo_too_large_is_rejected(self, repository):
        service = StudentService(repository, Settings(max_photo_size=10))

        with pytest.raises(ValidationError) as exc_info:
            service.create_student(make_request(photoBase64=b64(b"x" * 11)))

        assert "photoBase64" in exc_info.value.errors
        assert repository.count() == 0

    def test_photo_too_large_on_update_keeps_stored_photo(self, repository):
        service = StudentService(repository, Settings(max_photo_size=10))
        created = service.create_student(make_request(photoBase64=b64(b"small")))

        with pytest.raises(ValidationError) as exc_info:
            service.update_student(created.id, make_request(photoBase64=b64(b"y" * 11)))

        assert "photoBase64" in exc_info.value.errors
        assert repository.get(created.id).photo == b"small"

    def test_missing_fields_are_all_reported(self, service, repository):
        request = StudentRequest.model_validate({"name": "   "})

        with pytest.raises(ValidationError) as exc_info:
            service.create_student(request)

        assert exc_info.value.message == "Validation failed"
        assert exc_info.value.errors == {
            "name": "Name cannot be empty",
            "birthDate": "Birth date cannot be empty",
            "mobileNo": "Mobile number cannot be empty",
        }
        assert repository.count() == 0


class TestUpdateStudent:
    """Test student updates and the photo state they leave behind."""

    def test_update_fields(self, service):
        created = service.create_student(make_request())

        updated = service.update_student(
            created.id, make_request(name="Grace B. Hopper", mobileNo="555-0000")
        )

        assert updated.name == "Grace B. Hopper"
        assert updated.mobile_no == "555-0000"

    @pytest.mark.parametrize("photo_text", [None, ""])
    def test_update_without_photo_keeps_stored_photo(self, service, repository, photo_text):
        photo = create_test_jpeg(50, 50)
        created = service.create_student(make_request(photoBase64=b64(photo)))

        updated = service.update_student(
            created.id, make_request(name="Renamed", photoBase64=photo_text)
        )

        assert repository.get(created.id).photo == photo
        assert updated.photo_base64 == b64(photo)

    def test_update_with_malformed_photo_keeps_stored_photo(self, service, repository):
        photo = create_test_jpeg(50, 50)
        created = service.create_student(make_request(photoBase64=b64(photo)))

        service.update_student(created.id, make_request(photoBase64="!!!"))

        assert repository.get(created.id).photo == photo

    def test_update_replaces_photo(self, service, repository):
        created = service.create_student(make_request(photoBase64=b64(create_test_jpeg(20, 20))))
        new_photo = create_test_jpeg(40, 30)

        updated = service.update_student(created.id, make_request(photoBase64=b64(new_photo)))

        assert repository.get(created.id).photo == new_photo
        assert read_dimensions(base64.b64decode(updated.photo_base64)) == (40, 30)

    def test_update_adds_photo_to_student_without_one(self, service, repository):
        created = service.create_student(make_request())
        photo = create_test_jpeg(10, 10)

        service.update_student(created.id, make_request(photoBase64=b64(photo)))

        assert repository.get(created.id).photo == photo

    def test_update_missing_student(self, service):
        with pytest.raises(ResourceNotFoundError, match="Student not found with id: '99'"):
            service.update_student(99, make_request())

    def test_update_validates_before_lookup(self, service):
        with pytest.raises(ValidationError):
            service.update_student(99, make_request(mobileNo=""))


class TestReadStudents:
    """Test read paths."""

    def test_get_student(self, service):
        created = service.create_student(make_request())

        assert service.get_student(created.id) == created

    def test_get_missing_student(self, service):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            service.get_student(7)

        assert exc_info.value.message == "Student not found with id: '7'"

    def test_read_never_rewrites_stored_photo(self, service, repository):
        photo = create_test_jpeg(800, 600)
        created = service.create_student(make_request(photoBase64=b64(photo)))

        for _ in range(3):
            response = service.get_student(created.id)

        assert repository.get(created.id).photo == photo
        assert read_dimensions(base64.b64decode(response.photo_base64)) == (300, 225)

    def test_read_falls_back_when_resize_fails(self, service):
        photo = create_test_jpeg(800, 600)
        created = service.create_student(make_request(photoBase64=b64(photo)))

        with patch.object(Image.Image, "save", side_effect=OSError("no encoder")):
            response = service.get_student(created.id)

        assert response.photo_base64 == b64(photo)

    def test_configured_bounds_are_used(self, repository):
        service = StudentService(repository, Settings(photo_max_width=64, photo_max_height=64))
        created = service.create_student(make_request(photoBase64=b64(create_test_jpeg(128, 32))))

        returned = base64.b64decode(service.get_student(created.id).photo_base64)

        assert read_dimensions(returned) == (64, 16)

    def test_list_and_search(self, service):
        for name in ["Ada Lovelace", "Alan Turing", "Grace Hopper"]:
            service.create_student(make_request(name=name))

        assert [s.name for s in service.list_students()] == [
            "Ada Lovelace", "Alan Turing", "Grace Hopper"
        ]
        assert [s.name for s in service.list_students(name="a")] == [
            "Ada Lovelace", "Alan Turing", "Grace Hopper"
        ]
        assert [s.name for s in service.list_students(name="AL")] == [
            "Alan Turing"
        ]

    def test_page(self, service):
        for i in range(12):
            service.create_student(make_request(name=f"Student {i:02d}"))

        page = service.list_students_page(page=2, size=5)

        assert [s.name for s in page.content] == ["Student 10", "Student 11"]
        assert page.current_page == 2
        assert page.total_pages == 3
        assert page.total_items == 12
        assert page.page_size == 5

    def test_page_past_the_end_is_empty(self, service):
        service.create_student(make_request())

        page = service.list_students_page(page=4, size=5)

        assert page.content == []
        assert page.total_items == 1
        assert page.total_pages == 1

    def test_search_page(self, service):
        for i in range(4):
            service.create_student(make_request(name=f"Match {i}"))
            service.create_student(make_request(name=f"Skip {i}"))

        page = service.list_students_page(page=1, size=3, name="match")

        assert [s.name for s in page.content] == ["Match 3"]
        assert page.total_items == 4
        assert page.total_pages == 2

    @pytest.mark.parametrize("page,size,field", [(-1, 5, "page"), (0, 0, "size")])
    def test_invalid_page_arguments(self, service, page, size, field):
        with pytest.raises(ValidationError) as exc_info:
            service.list_students_page(page=page, size=size)

        assert field in exc_info.value.errors


class TestDeleteStudent:
    """Test deletion."""

    def test_delete_removes_record_and_photo(self, service, repository):
        created = service.create_student(make_request(photoBase64=b64(b"photo")))

        service.delete_student(created.id)

        assert repository.get(created.id) is None
        assert repository.count() == 0

    def test_delete_missing(self, service):
        with pytest.raises(ResourceNotFoundError):
            service.delete_student(1)
