"""Student record access and certificate persistence.

Each operation runs in its own session and transaction. The certificate blob
is replaced by a single UPDATE, so readers see either the previous document
or the new one, never a partial write.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from certengine.core.logger import get_logger
from certengine.errors import (
    CertificateNotGeneratedError,
    CertificatePersistenceError,
    CertificateValidationError,
    StudentNotFoundError,
)
from certengine.models import Student
from certengine.repositories.student_repository import StudentRepository
from certengine.schemas import (
    CertificateArtifact,
    CertificateState,
    CertificateStatus,
    GenerationResult,
    StudentRecord,
)

logger = get_logger(__name__)

REQUIRED_FIELDS = ("name", "certificate_id")


def _missing_fields(student: Student) -> list[str]:
    missing = []
    for field in REQUIRED_FIELDS:
        value = getattr(student, field)
        if value is None or not str(value).strip():
            missing.append(field)
    return missing


class ArtifactStore:
    """Reads student records and stores their generated certificates."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self.session_maker = session_maker

    async def load_for_generation(self, student_id: int) -> StudentRecord:
        """Load a student and check it has everything the certificate prints.

        Eligibility is not checked here; callers gate on it beforehand.

        Raises:
            StudentNotFoundError: No such student
            CertificateValidationError: name or certificate_id missing/blank
            CertificatePersistenceError: The datastore read failed
        """
        try:
            async with self.session_maker() as session:
                student = await StudentRepository(session).get_by_id(student_id)
        except SQLAlchemyError as e:
            raise CertificatePersistenceError(
                f"Failed to fetch student {student_id}"
            ) from e

        if student is None:
            raise StudentNotFoundError(student_id)

        missing = _missing_fields(student)
        if missing:
            logger.info(
                "certificate.validation.failed",
                student_id=student_id,
                missing_fields=missing,
            )
            raise CertificateValidationError(student_id, missing)

        return StudentRecord.model_validate(student)

    async def persist(self, student_id: int, content: bytes) -> GenerationResult:
        """Replace the student's certificate with ``content``.

        Raises:
            StudentNotFoundError: No row matched (nothing written)
            CertificatePersistenceError: The write failed and was rolled back
        """
        async with self.session_maker() as session:
            try:
                row = await StudentRepository(session).set_certificate(
                    student_id, content
                )
                if row is None:
                    await session.rollback()
                    raise StudentNotFoundError(student_id)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise CertificatePersistenceError(
                    f"Failed to save certificate for student {student_id}"
                ) from e

        name, certificate_id = row
        return GenerationResult(
            student_name=name or "",
            certificate_id=certificate_id or "",
            byte_size=len(content),
        )

    async def fetch_artifact(self, student_id: int) -> CertificateArtifact:
        """Load the stored certificate for a student.

        Raises:
            StudentNotFoundError: No such student
            CertificateNotGeneratedError: Student exists but has no certificate
            CertificatePersistenceError: The datastore read failed
        """
        try:
            async with self.session_maker() as session:
                row = await StudentRepository(session).get_certificate(student_id)
        except SQLAlchemyError as e:
            raise CertificatePersistenceError(
                f"Failed to fetch certificate for student {student_id}"
            ) from e

        if row is None:
            raise StudentNotFoundError(student_id)

        name, certificate_id, content = row
        if content is None:
            raise CertificateNotGeneratedError(student_id)

        return CertificateArtifact(
            content=content,
            student_name=name or "",
            certificate_id=certificate_id or "",
        )

    async def status(self, student_id: int) -> CertificateStatus:
        """Report whether the student's certificate has been generated.

        Raises:
            StudentNotFoundError: No such student
            CertificatePersistenceError: The datastore read failed
        """
        try:
            async with self.session_maker() as session:
                row = await StudentRepository(session).get_certificate_summary(
                    student_id
                )
        except SQLAlchemyError as e:
            raise CertificatePersistenceError(
                f"Failed to fetch status for student {student_id}"
            ) from e

        if row is None:
            raise StudentNotFoundError(student_id)

        name, eligible, has_certificate = row
        return CertificateStatus(
            student_id=student_id,
            student_name=name,
            eligible=bool(eligible),
            state=(
                CertificateState.GENERATED
                if has_certificate
                else CertificateState.NOT_GENERATED
            ),
        )
