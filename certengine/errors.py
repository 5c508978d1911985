"""Errors raised by the certificate pipeline.

A missing template is not an error (the layout falls back to a plain
background), so it has no exception here.
"""

from collections.abc import Sequence


class CertificateError(Exception):
    """Base class for certificate pipeline failures."""


class StudentNotFoundError(CertificateError):
    """Raised when no student matches the identifier."""

    def __init__(self, student_id: int):
        self.student_id = student_id
        super().__init__(f"Student {student_id} not found")


class CertificateValidationError(CertificateError):
    """Raised when a student record can't be printed on a certificate."""

    def __init__(
        self,
        student_id: int,
        missing_fields: Sequence[str] = (),
        message: str | None = None,
    ):
        self.student_id = student_id
        self.missing_fields = tuple(missing_fields)
        super().__init__(
            message or f"Missing required fields: {', '.join(self.missing_fields)}"
        )


class UnsupportedCharactersError(CertificateValidationError):
    """Raised when a field has characters the certificate fonts can't draw."""

    def __init__(self, student_id: int, field: str, characters: str):
        self.field = field
        self.characters = characters
        super().__init__(
            student_id,
            message=(
                f"{field} contains characters the certificate fonts cannot "
                f"render: {' '.join(characters)}"
            ),
        )


class CertificatePersistenceError(CertificateError):
    """Raised when the datastore read or write fails."""


class VerificationEncodingError(CertificateError):
    """Raised when the verification code cannot be produced or embedded."""


class CertificateNotGeneratedError(CertificateError):
    """Raised when a student exists but has no certificate yet."""

    def __init__(self, student_id: int):
        self.student_id = student_id
        super().__init__(f"Certificate not found for student {student_id}")
