"""SQLAlchemy models for certificate generation."""

from datetime import UTC, date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Integer,
    LargeBinary,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from certengine.core.database import Base


def utcnow() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(UTC)


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamp columns.

    Use this for any model that needs audit timestamps.
    """

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), default=utcnow)

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class Student(TimestampMixin, Base):
    """Student record owned by the enrolment system.

    The engine only ever writes the ``certificate`` column; every other
    column is read-only from its point of view.
    """

    __tablename__ = "students"
    __table_args__ = (
        UniqueConstraint("certificate_id", name="uq_students_certificate_id"),
    )

    student_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    certificate_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    course_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    company_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    eligible: Mapped[bool] = mapped_column(Boolean, default=False)

    # Finished PDF; NULL until the first successful generation
    certificate: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
