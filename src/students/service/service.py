"""StudentService - Student CRUD and the phone number sub-resource."""

from __future__ import annotations

from typing import TYPE_CHECKING

from students.logging import get_logger
from students.service.exceptions import PhoneNumberIndexError, StudentNotFoundError
from students.store import PhoneNumber, Student

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import ColumnElement

    from students.store import StudentRepository

logger = get_logger("service")


class StudentService:
    """Applies the merge policy for students and their phone numbers.

    Phone numbers have no identity of their own: they are addressed by their
    zero-based position in the owning student's list at the time of the call.
    Every phone number mutation reads the whole student, changes the list in
    memory, and writes the whole student back. Two concurrent mutations of
    the same student race and the last write wins. A write never brings back
    a student deleted in the meantime.
    """

    def __init__(self, repository: StudentRepository) -> None:
        """Initialize the service.

        Args:
            repository: StudentRepository used for all persistence.
        """
        self.repository = repository

    # --- Student Operations ---

    def create_student(
        self,
        name: str,
        enrollment: str,
        email: str,
        course_curriculum: str,
        classes: Sequence[str],
        phone_numbers: Sequence[PhoneNumber] = (),
    ) -> Student:
        """Create a new student with a freshly generated ID.

        Fields are stored verbatim; validation is the caller's job.

        Raises:
            StudentConflictError: If enrollment or email is already taken
        """
        student = Student(
            name=name,
            enrollment=enrollment,
            email=email,
            course_curriculum=course_curriculum,
            phone_numbers=[_copy_phone(p) for p in phone_numbers],
            classes=list(classes),
        )
        created = self.repository.add(student)
        logger.info("Created student %s (enrollment=%s)", created.id, created.enrollment)
        return created

    def get_student(self, student_id: str) -> Student:
        """Get a student by ID.

        Raises:
            StudentNotFoundError: If student doesn't exist
        """
        student = self.repository.get_by_id(student_id)
        if student is None:
            raise StudentNotFoundError(f"Student with id '{student_id}' not found")
        return student

    def list_students(
        self,
        name: str | None = None,
        enrollment: str | None = None,
        email: str | None = None,
    ) -> list[Student]:
        """List students matching every given filter.

        Args:
            name: Substring of the student's name. Matching ignores case on
                every backend, so "ana" finds "Mariana"; "%" and "_" match
                themselves
            enrollment: Exact enrollment
            email: Exact email

        Empty or None filters are ignored.
        """
        criteria: list[ColumnElement[bool]] = []
        if name:
            criteria.append(Student.name.icontains(name, autoescape=True))
        if enrollment:
            criteria.append(Student.enrollment == enrollment)
        if email:
            criteria.append(Student.email == email)
        return self.repository.find(*criteria)

    def update_student(
        self,
        student_id: str,
        name: str | None = None,
        enrollment: str | None = None,
        email: str | None = None,
        course_curriculum: str | None = None,
        phone_numbers: Sequence[PhoneNumber] | None = None,
        classes: Sequence[str] | None = None,
    ) -> Student | None:
        """Replace the provided fields, keeping the rest.

        Lists are replaced whole, never merged element by element.

        Returns:
            The updated student, or None if it doesn't exist (no-op).

        Raises:
            StudentConflictError: If the new enrollment or email is already taken
        """
        student = self.repository.get_by_id(student_id)
        if student is None:
            logger.debug("Update of missing student %s ignored", student_id)
            return None
        return self._apply(
            student,
            name=name,
            enrollment=enrollment,
            email=email,
            course_curriculum=course_curriculum,
            phone_numbers=phone_numbers,
            classes=classes,
        )

    def patch_student(
        self,
        student_id: str,
        name: str | None = None,
        enrollment: str | None = None,
        email: str | None = None,
        course_curriculum: str | None = None,
        phone_numbers: Sequence[PhoneNumber] | None = None,
        classes: Sequence[str] | None = None,
    ) -> Student:
        """Same merge as update_student, but a missing student is an error.

        Raises:
            StudentNotFoundError: If student doesn't exist
            StudentConflictError: If the new enrollment or email is already taken
        """
        student = self.get_student(student_id)
        updated = self._apply(
            student,
            name=name,
            enrollment=enrollment,
            email=email,
            course_curriculum=course_curriculum,
            phone_numbers=phone_numbers,
            classes=classes,
        )
        if updated is None:
            raise StudentNotFoundError(f"Student with id '{student_id}' not found")
        return updated

    def delete_student(self, student_id: str) -> None:
        """Delete a student. Deleting a missing student is not an error."""
        if self.repository.delete(student_id):
            logger.info("Deleted student %s", student_id)

    def _apply(
        self,
        student: Student,
        name: str | None,
        enrollment: str | None,
        email: str | None,
        course_curriculum: str | None,
        phone_numbers: Sequence[PhoneNumber] | None,
        classes: Sequence[str] | None,
    ) -> Student | None:
        if name is not None:
            student.name = name
        if enrollment is not None:
            student.enrollment = enrollment
        if email is not None:
            student.email = email
        if course_curriculum is not None:
            student.course_curriculum = course_curriculum
        if phone_numbers is not None:
            student.phone_numbers = [_copy_phone(p) for p in phone_numbers]
        if classes is not None:
            student.classes = list(classes)

        updated = self.repository.update(student)
        if updated is None:
            logger.debug("Student %s deleted before update was written", student.id)
            return None
        logger.info("Updated student %s", updated.id)
        return updated

    def _save(self, student: Student) -> None:
        if self.repository.update(student) is None:
            raise StudentNotFoundError(f"Student with id '{student.id}' not found")

    # --- Phone Number Operations ---

    def add_phone_number(self, student_id: str, phone: PhoneNumber) -> PhoneNumber:
        """Append a phone number to the end of the student's list.

        Raises:
            StudentNotFoundError: If student doesn't exist
        """
        student = self.get_student(student_id)
        added = _copy_phone(phone)
        student.phone_numbers = [*student.phone_numbers, added]
        self._save(student)
        logger.info(
            "Added phone number %d to student %s", len(student.phone_numbers) - 1, student_id
        )
        return added

    def list_phone_numbers(self, student_id: str) -> list[PhoneNumber]:
        """Get the student's phone numbers in order.

        Raises:
            StudentNotFoundError: If student doesn't exist
        """
        return list(self.get_student(student_id).phone_numbers)

    def get_phone_number(self, student_id: str, index: int) -> PhoneNumber:
        """Get the phone number at a position.

        Raises:
            StudentNotFoundError: If student doesn't exist
            PhoneNumberIndexError: If index is outside [0, len)
        """
        student = self.get_student(student_id)
        return student.phone_numbers[_check_index(student, index)]

    def replace_phone_number(
        self, student_id: str, index: int, phone: PhoneNumber
    ) -> PhoneNumber:
        """Overwrite every field of the phone number at a position.

        Raises:
            StudentNotFoundError: If student doesn't exist
            PhoneNumberIndexError: If index is outside [0, len)
        """
        student = self.get_student(student_id)
        position = _check_index(student, index)
        replacement = _copy_phone(phone)
        phones = list(student.phone_numbers)
        phones[position] = replacement
        student.phone_numbers = phones
        self._save(student)
        return replacement

    def merge_phone_number(
        self,
        student_id: str,
        index: int,
        ddd: int | None = None,
        number: int | None = None,
        description: str | None = None,
    ) -> PhoneNumber:
        """Partially update the phone number at a position.

        ``ddd`` and ``number`` are kept when None or 0, since 0 has always
        meant "not supplied" for these fields. ``description`` is kept only
        when None; an empty string overwrites it.

        Raises:
            StudentNotFoundError: If student doesn't exist
            PhoneNumberIndexError: If index is outside [0, len)
        """
        student = self.get_student(student_id)
        position = _check_index(student, index)
        current = student.phone_numbers[position]
        merged = PhoneNumber(
            ddd=ddd if ddd else current.ddd,
            number=number if number else current.number,
            description=description if description is not None else current.description,
        )
        phones = list(student.phone_numbers)
        phones[position] = merged
        student.phone_numbers = phones
        self._save(student)
        return merged

    def remove_phone_number(self, student_id: str, index: int) -> None:
        """Remove the phone number at a position, shifting later ones left.

        Raises:
            StudentNotFoundError: If student doesn't exist
            PhoneNumberIndexError: If index is outside [0, len)
        """
        student = self.get_student(student_id)
        position = _check_index(student, index)
        phones = list(student.phone_numbers)
        del phones[position]
        student.phone_numbers = phones
        self._save(student)
        logger.info("Removed phone number %d from student %s", position, student_id)


def _check_index(student: Student, index: int) -> int:
    # Negative indexes are rejected, not counted from the end
    if index < 0 or index >= len(student.phone_numbers):
        raise PhoneNumberIndexError(
            f"Phone number index {index} out of range for student '{student.id}' "
            f"({len(student.phone_numbers)} phone numbers)"
        )
    return index


def _copy_phone(phone: PhoneNumber) -> PhoneNumber:
    return PhoneNumber(ddd=phone.ddd, number=phone.number, description=phone.description)
