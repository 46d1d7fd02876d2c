"""Database models for the Student Records service."""

from .db import Base, Student

__all__ = ["Base", "Student"]
