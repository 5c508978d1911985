"""Pydantic schemas passed between the store, renderer and callers."""

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

PDF_MEDIA_TYPE = "application/pdf"


class StudentRecord(BaseModel):
    """Read-only snapshot of a student row, without the certificate blob."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    student_id: int
    name: str
    certificate_id: str
    course_name: str | None = None
    company_name: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    eligible: bool = False


class GenerationResult(BaseModel):
    """Confirmation returned after a certificate is generated and stored."""

    student_name: str
    certificate_id: str
    byte_size: int


class CertificateArtifact(BaseModel):
    """Stored certificate bytes plus the metadata needed to frame a download."""

    content: bytes
    student_name: str
    certificate_id: str


class CertificateDownload(CertificateArtifact):
    """A certificate ready to be streamed to the caller."""

    media_type: str = PDF_MEDIA_TYPE

    @property
    def filename(self) -> str:
        return f"{self.student_name}_Certificate_{self.certificate_id}.pdf"


class CertificateState(StrEnum):
    NOT_GENERATED = "not_generated"
    GENERATED = "generated"


class CertificateStatus(BaseModel):
    """Where a student stands in the generation lifecycle."""

    student_id: int
    student_name: str | None
    eligible: bool
    state: CertificateState
