"""Repository for student and certificate artifact operations."""

from sqlalchemy import Row, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from certengine.models import Student, utcnow
from certengine.repositories.utils import log_slow_query


class StudentRepository:
    """Repository for reading students and writing their certificate blob."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    @log_slow_query("get_student_by_id")
    async def get_by_id(self, student_id: int) -> Student | None:
        """Get a student by primary key."""
        result = await self.db.execute(
            select(Student).where(Student.student_id == student_id)
        )
        return result.scalar_one_or_none()

    @log_slow_query("get_student_certificate")
    async def get_certificate(
        self, student_id: int
    ) -> Row[tuple[str | None, str | None, bytes | None]] | None:
        """Get (name, certificate_id, certificate) for a student, or None."""
        result = await self.db.execute(
            select(Student.name, Student.certificate_id, Student.certificate).where(
                Student.student_id == student_id
            )
        )
        return result.one_or_none()

    @log_slow_query("get_student_certificate_summary")
    async def get_certificate_summary(
        self, student_id: int
    ) -> Row[tuple[str | None, bool, bool]] | None:
        """Get (name, eligible, has_certificate) without loading the blob."""
        result = await self.db.execute(
            select(
                Student.name,
                Student.eligible,
                Student.certificate.is_not(None),
            ).where(Student.student_id == student_id)
        )
        return result.one_or_none()

    @log_slow_query("set_student_certificate")
    async def set_certificate(
        self, student_id: int, content: bytes
    ) -> Row[tuple[str | None, str | None]] | None:
        """Overwrite the certificate blob in a single UPDATE.

        Returns (name, certificate_id) of the updated row, or None if no
        student matched. Does NOT commit; the caller owns the transaction.
        """
        result = await self.db.execute(
            update(Student)
            .where(Student.student_id == student_id)
            .values(certificate=content, updated_at=utcnow())
            .returning(Student.name, Student.certificate_id)
            .execution_options(synchronize_session=False)
        )
        return result.one_or_none()
