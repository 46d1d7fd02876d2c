import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, List, Optional

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from student_records.db import init_db
from student_records.dependencies import get_student_service
from student_records.exceptions import StudentServiceError, ValidationError
from student_records.schemas import (
    ApiResponse,
    PageResponse,
    StudentRequest,
    StudentResponse,
)
from student_records.services import StudentService
from config import get_settings

# Get settings and configure logging before anything else
settings = get_settings()
settings.configure_logging()

logger = logging.getLogger(__name__)

STUDENTS_PATH = f"{settings.api_prefix}/students"
STATIC_DIR = Path(__file__).parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Repository backend: {settings.repository_backend}")
    logger.info(
        f"Photo bounds: {settings.photo_max_width}x{settings.photo_max_height} "
        f"({settings.photo_format})"
    )

    if settings.repository_backend == "database":
        init_db()

    yield

    logger.info("Shutting down application")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _envelope(status_code: int, message: str, data: Any = None) -> JSONResponse:
    body = ApiResponse.error(message, data=data).model_dump(mode="json", by_alias=True)
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(StudentServiceError)
async def handle_service_error(request: Request, exc: StudentServiceError) -> JSONResponse:
    """Map service errors onto the response envelope."""
    data = exc.errors if isinstance(exc, ValidationError) else None
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return _envelope(exc.status_code, exc.message, data)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed requests as 400 with one message per field."""
    errors = {
        ".".join(str(part) for part in error["loc"] if part != "body"): error["msg"]
        for error in exc.errors()
    }
    logger.warning(f"{request.method} {request.url.path} -> 400: {errors}")
    return _envelope(status.HTTP_400_BAD_REQUEST, "Validation failed", errors)


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        f"An unexpected error occurred: {exc}",
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Simple health-check endpoint."""
    return {
        "status": "ok",
        "environment": settings.environment,
        "version": settings.app_version,
    }


@app.get("/config")
def get_config() -> dict[str, Any]:
    """Get current configuration (non-sensitive values only)."""
    return {
        "app_name": settings.app_name,
        "app_version": settings.app_version,
        "environment": settings.environment,
        "debug": settings.debug,
        "api_prefix": settings.api_prefix,
        "repository_backend": settings.repository_backend,
        "default_page_size": settings.default_page_size,
        "photo_max_width": settings.photo_max_width,
        "photo_max_height": settings.photo_max_height,
        "photo_format": settings.photo_format,
        "log_level": settings.log_level,
        "log_json": settings.log_json,
    }


@app.get(STUDENTS_PATH, response_model=ApiResponse[List[StudentResponse]], tags=["students"])
def list_students(
    service: StudentService = Depends(get_student_service),
) -> ApiResponse[List[StudentResponse]]:
    """List all students ordered by id."""
    students = service.list_students()
    return ApiResponse[List[StudentResponse]].ok(students, "Students retrieved successfully")


@app.get(
    f"{STUDENTS_PATH}/paged",
    response_model=ApiResponse[PageResponse[StudentResponse]],
    tags=["students"],
)
def list_students_paged(
    page: int = Query(0, ge=0, description="0-based page index"),
    size: Optional[int] = Query(None, ge=1, le=settings.max_page_size, description="Page size"),
    service: StudentService = Depends(get_student_service),
) -> ApiResponse[PageResponse[StudentResponse]]:
    """List one page of students ordered by id."""
    result = service.list_students_page(page, size or settings.default_page_size)
    return ApiResponse[PageResponse[StudentResponse]].ok(result, "Students retrieved successfully")


@app.get(
    f"{STUDENTS_PATH}/search",
    response_model=ApiResponse[List[StudentResponse]],
    tags=["students"],
)
def search_students(
    name: str = Query(..., description="Case-insensitive part of the name"),
    service: StudentService = Depends(get_student_service),
) -> ApiResponse[List[StudentResponse]]:
    """List students whose name contains ``name``."""
    students = service.list_students(name=name)
    return ApiResponse[List[StudentResponse]].ok(students, "Students retrieved successfully")


@app.get(
    f"{STUDENTS_PATH}/search/paged",
    response_model=ApiResponse[PageResponse[StudentResponse]],
    tags=["students"],
)
def search_students_paged(
    name: str = Query(..., description="Case-insensitive part of the name"),
    page: int = Query(0, ge=0, description="0-based page index"),
    size: Optional[int] = Query(None, ge=1, le=settings.max_page_size, description="Page size"),
    service: StudentService = Depends(get_student_service),
) -> ApiResponse[PageResponse[StudentResponse]]:
    """List one page of students whose name contains ``name``."""
    result = service.list_students_page(page, size or settings.default_page_size, name=name)
    return ApiResponse[PageResponse[StudentResponse]].ok(result, "Students retrieved successfully")


@app.get(
    f"{STUDENTS_PATH}/{{student_id}}",
    response_model=ApiResponse[StudentResponse],
    tags=["students"],
)
def get_student(
    student_id: int,
    service: StudentService = Depends(get_student_service),
) -> ApiResponse[StudentResponse]:
    """Get a student by id.

    Raises:
        ResourceNotFoundError: If the student does not exist (404).
    """
    student = service.get_student(student_id)
    return ApiResponse[StudentResponse].ok(student, "Student retrieved successfully")


@app.post(
    STUDENTS_PATH,
    response_model=ApiResponse[StudentResponse],
    status_code=status.HTTP_201_CREATED,
    tags=["students"],
)
def create_student(
    payload: StudentRequest,
    service: StudentService = Depends(get_student_service),
) -> ApiResponse[StudentResponse]:
    """Create a student.

    ``photoBase64`` is optional; text that is not valid Base64 is ignored
    and the student is saved without a photo.
    """
    student = service.create_student(payload)
    return ApiResponse[StudentResponse].ok(student, "Student created successfully")


@app.put(
    f"{STUDENTS_PATH}/{{student_id}}",
    response_model=ApiResponse[StudentResponse],
    tags=["students"],
)
def update_student(
    student_id: int,
    payload: StudentRequest,
    service: StudentService = Depends(get_student_service),
) -> ApiResponse[StudentResponse]:
    """Update a student. An absent or empty ``photoBase64`` keeps the stored photo."""
    student = service.update_student(student_id, payload)
    return ApiResponse[StudentResponse].ok(student, "Student updated successfully")


@app.delete(
    f"{STUDENTS_PATH}/{{student_id}}",
    response_model=ApiResponse,
    tags=["students"],
)
def delete_student(
    student_id: int,
    service: StudentService = Depends(get_student_service),
) -> ApiResponse:
    """Delete a student and its photo."""
    service.delete_student(student_id)
    return ApiResponse.ok(None, "Student deleted successfully")


if settings.ui_path:
    app.mount(settings.ui_path, StaticFiles(directory=STATIC_DIR, html=True), name="ui")

    @app.get("/", include_in_schema=False)
    def index() -> RedirectResponse:
        return RedirectResponse(url=f"{settings.ui_path}/")
