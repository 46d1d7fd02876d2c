"""Student-related Pydantic schemas for API requests and responses."""

import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StudentRequest(BaseModel):
    """Body of create and update requests.

    Required fields are optional here on purpose: missing values are
    reported by the service as a 400 with one message per field.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "examples": [
                {
                    "name": "Ada Lovelace",
                    "birthDate": "2004-12-10",
                    "mobileNo": "+44 7700 900123",
                    "photoBase64": "/9j/4AAQSkZJRgABAQAAAQABAAD..."
                }
            ]
        }
    )

    name: Optional[str] = Field(
        None,
        description="Student's full name"
    )

    birth_date: Optional[datetime.date] = Field(
        None,
        alias="birthDate",
        description="Date of birth (ISO 8601)"
    )

    mobile_no: Optional[str] = Field(
        None,
        alias="mobileNo",
        description="Mobile phone number"
    )

    photo_base64: Optional[str] = Field(
        None,
        alias="photoBase64",
        description="Photo as Base64 text. Omit or send an empty string on"
                    " update to keep the stored photo."
    )


class StudentResponse(BaseModel):
    """A student as returned by the API.

    ``photoBase64`` is derived on every read: the stored photo resized to
    fit the configured bounding box and Base64 encoded.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "id": 1,
                    "name": "Ada Lovelace",
                    "birthDate": "2004-12-10",
                    "mobileNo": "+44 7700 900123",
                    "photoBase64": None
                }
            ]
        }
    )

    id: int = Field(
        ...,
        description="Unique identifier of the student"
    )

    name: str = Field(
        ...,
        description="Student's full name"
    )

    birth_date: datetime.date = Field(
        ...,
        alias="birthDate",
        description="Date of birth"
    )

    mobile_no: str = Field(
        ...,
        alias="mobileNo",
        description="Mobile phone number"
    )

    photo_base64: Optional[str] = Field(
        None,
        alias="photoBase64",
        description="Display-ready photo as Base64 JPEG (or the original"
                    " bytes when they could not be resized); null without a photo"
    )
