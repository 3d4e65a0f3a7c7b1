"""SQLAlchemy models for the student store."""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass
from typing import Any

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


@dataclass
class PhoneNumber:
    """Phone number embedded in a student, addressed by its position."""

    ddd: int
    number: int
    description: str


class PhoneNumberList(TypeDecorator[list[PhoneNumber]]):
    """Stores a list of PhoneNumber as a JSON array of objects."""

    impl = JSON
    cache_ok = True

    def process_bind_param(
        self, value: list[PhoneNumber] | None, dialect: Any
    ) -> list[dict[str, Any]] | None:
        if value is None:
            return None
        return [asdict(phone) for phone in value]

    def process_result_value(
        self, value: list[dict[str, Any]] | None, dialect: Any
    ) -> list[PhoneNumber]:
        if not value:
            return []
        return [PhoneNumber(**item) for item in value]


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Student(Base):
    """Student aggregate - phone numbers and classes live in JSON columns."""

    __tablename__ = "students"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    enrollment: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    course_curriculum: Mapped[str] = mapped_column(Text, nullable=False)
    phone_numbers: Mapped[list[PhoneNumber]] = mapped_column(
        PhoneNumberList, nullable=False, default=list
    )
    classes: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    def __init__(
        self,
        name: str,
        enrollment: str,
        email: str,
        course_curriculum: str,
        id: str | None = None,
        phone_numbers: list[PhoneNumber] | None = None,
        classes: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.name = name
        self.enrollment = enrollment
        self.email = email
        self.course_curriculum = course_curriculum
        self.phone_numbers = list(phone_numbers) if phone_numbers is not None else []
        self.classes = list(classes) if classes is not None else []

    def __repr__(self) -> str:
        return (
            f"<Student(id={self.id!r}, name={self.name!r}, "
            f"enrollment={self.enrollment!r})>"
        )
