"""Pydantic models for REST API."""

from typing import Any, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from students.store import PhoneNumber

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


class CamelModel(BaseModel):
    """Base model with camelCase JSON names; snake_case is accepted on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Phone number models


class PhoneNumberCreate(CamelModel):
    """Request model for adding or replacing a phone number."""

    ddd: int
    number: int
    description: str

    def to_phone_number(self) -> PhoneNumber:
        return PhoneNumber(ddd=self.ddd, number=self.number, description=self.description)


class PhoneNumberUpdate(CamelModel):
    """Request model for patching a phone number.

    Omitted fields are kept. A ddd or number of 0 is also kept.
    """

    ddd: int | None = None
    number: int | None = None
    description: str | None = None


class PhoneNumberResponse(CamelModel):
    """Response model for a phone number."""

    model_config = ConfigDict(from_attributes=True)

    ddd: int
    number: int
    description: str


def phone_number_to_response(phone: Any) -> PhoneNumberResponse:
    """Convert a PhoneNumber to PhoneNumberResponse."""
    return PhoneNumberResponse.model_validate(phone)


# Student models


class StudentCreate(CamelModel):
    """Request model for creating a student."""

    name: str = Field(..., min_length=1)
    enrollment: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    course_curriculum: str = Field(..., min_length=1)
    phone_numbers: list[PhoneNumberCreate] = Field(default_factory=list)
    classes: list[UUID] = Field(..., min_length=1)


class StudentUpdate(CamelModel):
    """Request model for updating a student. Omitted fields are kept."""

    name: str | None = Field(default=None, min_length=1)
    enrollment: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    course_curriculum: str | None = Field(default=None, min_length=1)
    phone_numbers: list[PhoneNumberCreate] | None = None
    classes: list[UUID] | None = Field(default=None, min_length=1)

    def to_changes(self) -> dict[str, Any]:
        """Keyword arguments for StudentService.update_student/patch_student."""
        return {
            "name": self.name,
            "enrollment": self.enrollment,
            "email": self.email,
            "course_curriculum": self.course_curriculum,
            "phone_numbers": (
                [p.to_phone_number() for p in self.phone_numbers]
                if self.phone_numbers is not None
                else None
            ),
            "classes": [str(c) for c in self.classes] if self.classes is not None else None,
        }


class StudentResponse(CamelModel):
    """Response model for a student."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    enrollment: str
    email: str
    course_curriculum: str
    phone_numbers: list[PhoneNumberResponse]
    classes: list[UUID]


def student_to_response(student: Any) -> StudentResponse:
    """Convert a Student model to StudentResponse."""
    return StudentResponse.model_validate(student)
