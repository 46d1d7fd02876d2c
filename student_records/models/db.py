"""SQLAlchemy database models."""

from sqlalchemy import Column, Date, Integer, LargeBinary, String
from sqlalchemy.orm import declarative_base

# Create the declarative base
Base = declarative_base()


class Student(Base):
    """Model representing a student record.

    The photo is stored as raw image bytes exactly as the client sent them;
    resizing for display happens on read and is never written back.
    """
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)

    name = Column(String(255), nullable=False, index=True)

    birth_date = Column(Date, nullable=False)

    mobile_no = Column(String(32), nullable=False)

    # Raw photo bytes; NULL when the student has no photo
    photo = Column(LargeBinary, nullable=True)

    def __repr__(self) -> str:
        photo = f"{len(self.photo)} bytes" if self.has_photo else None
        return f"<Student(id={self.id}, name={self.name!r}, photo={photo})>"

    @property
    def has_photo(self) -> bool:
        return bool(self.photo)
