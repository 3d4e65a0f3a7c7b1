"""Student CRUD endpoints."""

from fastapi import APIRouter, Depends, Request, Response, status

from students.api.dependencies import StudentServiceDep, get_current_user
from students.api.models import (
    APIResponse,
    StudentCreate,
    StudentResponse,
    StudentUpdate,
    student_to_response,
)

router = APIRouter(
    prefix="/students",
    tags=["students"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=APIResponse[list[StudentResponse]])
def list_students(
    service: StudentServiceDep,
    name: str | None = None,
    enrollment: str | None = None,
    email: str | None = None,
) -> APIResponse[list[StudentResponse]]:
    """List students, optionally filtered by name substring, enrollment or email."""
    students = service.list_students(name=name, enrollment=enrollment, email=email)
    return APIResponse(data=[student_to_response(s) for s in students])


@router.post(
    "",
    response_model=APIResponse[StudentResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_student(
    student: StudentCreate,
    service: StudentServiceDep,
    request: Request,
    response: Response,
) -> APIResponse[StudentResponse]:
    """Create a new student."""
    created = service.create_student(
        name=student.name,
        enrollment=student.enrollment,
        email=student.email,
        course_curriculum=student.course_curriculum,
        phone_numbers=[p.to_phone_number() for p in student.phone_numbers],
        classes=[str(c) for c in student.classes],
    )
    response.headers["Location"] = str(request.url_for("get_student", student_id=created.id))
    return APIResponse(data=student_to_response(created))


@router.get("/{student_id}", response_model=APIResponse[StudentResponse])
def get_student(student_id: str, service: StudentServiceDep) -> APIResponse[StudentResponse]:
    """Get a student by ID."""
    student = service.get_student(student_id)
    return APIResponse(data=student_to_response(student))


@router.put("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_student(student_id: str, student: StudentUpdate, service: StudentServiceDep) -> None:
    """Update a student. Omitted fields are kept; unknown IDs are ignored."""
    service.update_student(student_id, **student.to_changes())


@router.patch("/{student_id}", response_model=APIResponse[StudentResponse])
def patch_student(
    student_id: str, student: StudentUpdate, service: StudentServiceDep
) -> APIResponse[StudentResponse]:
    """Update a student (partial update)."""
    updated = service.patch_student(student_id, **student.to_changes())
    return APIResponse(data=student_to_response(updated))


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(student_id: str, service: StudentServiceDep) -> None:
    """Delete a student. Deleting an unknown ID succeeds."""
    service.delete_student(student_id)
