"""StudentRepository - relational CRUD over the Student aggregate."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from students.store.exceptions import StudentConflictError
from students.store.models import Student

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

    from students.store.database import Database


class StudentRepository:
    """Persistence for students.

    Each call opens its own session from the injected Database and closes it
    before returning. Returned students are detached and safe to mutate.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    def add(self, student: Student) -> Student:
        """Insert a new student.

        Raises:
            StudentConflictError: If enrollment or email is already taken
        """
        session = self._db.get_session()
        try:
            session.add(student)
            session.commit()
            session.refresh(student)
            return student
        except IntegrityError as e:
            session.rollback()
            raise _conflict(student) from e
        finally:
            session.close()

    def get_by_id(self, student_id: str) -> Student | None:
        """Get a student by ID, or None if it doesn't exist."""
        session = self._db.get_session()
        try:
            return session.get(Student, student_id)
        finally:
            session.close()

    def get_all(self) -> list[Student]:
        """List every student in storage order."""
        return self.find()

    def find(self, *criteria: ColumnElement[bool]) -> list[Student]:
        """List students matching all of the given SQL criteria.

        Args:
            criteria: Boolean clauses over Student columns, combined with AND.
                No criteria returns every student.
        """
        session = self._db.get_session()
        try:
            stmt = select(Student).where(*criteria)
            return list(session.execute(stmt).scalars().all())
        finally:
            session.close()

    def update(self, student: Student) -> Student | None:
        """Write the whole student back, replacing the stored row.

        A student deleted since it was read is not written again.

        Returns:
            The stored student, or None if its row no longer exists.

        Raises:
            StudentConflictError: If the new enrollment or email is already taken
        """
        session = self._db.get_session()
        try:
            if session.get(Student, student.id) is None:
                return None
            merged = session.merge(student)
            session.commit()
            return merged
        except IntegrityError as e:
            session.rollback()
            raise _conflict(student) from e
        finally:
            session.close()

    def delete(self, student_id: str) -> bool:
        """Delete a student if present.

        Returns:
            True if a student was deleted, False if it didn't exist.
        """
        session = self._db.get_session()
        try:
            student = session.get(Student, student_id)
            if student is None:
                return False
            session.delete(student)
            session.commit()
            return True
        finally:
            session.close()


def _conflict(student: Student) -> StudentConflictError:
    # Every constraint a complete row can break is a uniqueness one:
    # the id, enrollment and email
    return StudentConflictError(
        f"Student with enrollment '{student.enrollment}' "
        f"or email '{student.email}' already exists"
    )
