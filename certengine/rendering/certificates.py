"""Certificate rendering - PDF page layout.

This module handles the visual/presentation aspects of certificates:
- Template background, or a plain fallback when no template is usable
- Text blocks centered using the real font metrics
- QR verification glyph and its caption

This is separated from certificate business logic (loading records, storing
the finished document) which lives in services/certificates_service.py.
"""

import io
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Protocol

from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from certengine.core.logger import get_logger
from certengine.errors import UnsupportedCharactersError, VerificationEncodingError
from certengine.schemas import StudentRecord

logger = get_logger(__name__)

# Landscape US Letter, 72 points per inch. Origin is bottom-left.
PAGE_WIDTH = 792
PAGE_HEIGHT = 612

# PDF base-14 fonts, always available in viewers without embedding.
# They only cover WinAnsi (cp1252); other scripts need TrueType fonts.
SERIF_FONT = "Times-Roman"
SERIF_BOLD_FONT = "Times-Bold"
SANS_FONT = "Helvetica"
BASE_FONT_CODEC = "cp1252"

NAME_FONT_SIZE = 48
BODY_FONT_SIZE = 20
CAPTION_FONT_SIZE = 10

# Baselines, measured down from the top edge
NAME_OFFSET = 248  # 3.45in
COMPLETION_OFFSET = 317  # 4.4in
COMPANY_OFFSET = 345
DATES_OFFSET = 373
CERT_ID_OFFSET = 230
ISSUED_OFFSET = 245

QR_SIZE = 120
QR_INSET = 86  # 1.2in from the right and top edges

FALLBACK_FILL_GRAY = 0.98
FALLBACK_BORDER_GRAY = 0.2
FALLBACK_BORDER_INSET = 20
FALLBACK_BORDER_WIDTH = 2

DEFAULT_COURSE_NAME = "FULL STACK DEVELOPMENT"
DEFAULT_COMPANY_NAME = "ADDWISE TECH INNOVATIONS"
DEFAULT_START_DATE = "MAY 20, 2025"
DEFAULT_END_DATE = "JULY 20, 2025"


class TextMeasurer(Protocol):
    """Measures the rendered width of a string in points."""

    def measure(self, text: str, font: str, size: float) -> float: ...


class ReportLabTextMeasurer:
    """Width of a string set in one of ReportLab's registered fonts."""

    def measure(self, text: str, font: str, size: float) -> float:
        return stringWidth(text, font, size)


def register_ttf(path: Path | str) -> str:
    """Register a TrueType font file with ReportLab and return its font name."""
    path = Path(path)
    name = f"certengine-{path.stem}"
    if name not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(TTFont(name, str(path)))
    return name


@dataclass(frozen=True)
class CertificateFonts:
    """Fonts for the three text roles on the page."""

    serif: str = SERIF_FONT
    serif_bold: str = SERIF_BOLD_FONT
    sans: str = SANS_FONT

    @classmethod
    def from_files(
        cls,
        serif: Path | str | None = None,
        serif_bold: Path | str | None = None,
        sans: Path | str | None = None,
    ) -> "CertificateFonts":
        """Use TrueType files for the given roles; the rest stay base-14."""
        return cls(
            serif=register_ttf(serif) if serif else SERIF_FONT,
            serif_bold=register_ttf(serif_bold) if serif_bold else SERIF_BOLD_FONT,
            sans=register_ttf(sans) if sans else SANS_FONT,
        )


def _base_font_has(char: str) -> bool:
    try:
        char.encode(BASE_FONT_CODEC)
    except UnicodeEncodeError:
        return False
    return True


def unsupported_characters(text: str, font_name: str) -> str:
    """Characters of ``text`` that ``font_name`` can't draw, deduplicated."""
    font = pdfmetrics.getFont(font_name)
    if isinstance(font, TTFont):
        glyphs = font.face.charToGlyph
        missing = (char for char in text if ord(char) not in glyphs)
    else:
        missing = (char for char in text if not _base_font_has(char))
    return "".join(dict.fromkeys(missing))


def format_date(value: date) -> str:
    """Format a date as "1 July 2025" (no leading zero on the day)."""
    return f"{value.day} {value:%B} {value.year}"


def format_issued_date(value: date) -> str:
    """Format a date as "July 1, 2025"."""
    return f"{value:%B} {value.day}, {value.year}"


def completion_text(course_name: str | None) -> str:
    course = course_name or DEFAULT_COURSE_NAME
    return f"has successfully completed a {course} program at"


def date_range_text(start_date: date | None, end_date: date | None) -> str:
    start = format_date(start_date) if start_date else DEFAULT_START_DATE
    end = format_date(end_date) if end_date else DEFAULT_END_DATE
    return f"FROM {start} TO {end}"


def _load_image(data: bytes) -> Image.Image:
    """Fully decode image bytes so malformed data fails before drawing."""
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


class CertificateLayout:
    """Lays out a single-page certificate and serializes it to PDF."""

    width = PAGE_WIDTH
    height = PAGE_HEIGHT

    def __init__(
        self,
        measurer: TextMeasurer | None = None,
        fonts: CertificateFonts | None = None,
    ) -> None:
        self.measurer = measurer or ReportLabTextMeasurer()
        self.fonts = fonts or CertificateFonts()

    def centered_x(self, text: str, font: str, size: float) -> float:
        return self.width / 2 - self.measurer.measure(text, font, size) / 2

    def check_text(self, record: StudentRecord) -> None:
        """Make sure every printed field can be drawn with the configured fonts.

        Raises:
            UnsupportedCharactersError: A field has characters with no glyph
        """
        printed = (
            ("name", record.name, self.fonts.serif_bold),
            ("course_name", completion_text(record.course_name), self.fonts.serif),
            (
                "company_name",
                record.company_name or DEFAULT_COMPANY_NAME,
                self.fonts.serif_bold,
            ),
            ("certificate_id", record.certificate_id, self.fonts.sans),
        )
        for field, text, font in printed:
            missing = unsupported_characters(text, font)
            if missing:
                logger.info(
                    "certificate.validation.unsupported_characters",
                    student_id=record.student_id,
                    field=field,
                    font=font,
                )
                raise UnsupportedCharactersError(record.student_id, field, missing)

    def compose(
        self,
        record: StudentRecord,
        background: bytes | None,
        verification_image: bytes,
        *,
        issued_on: date | None = None,
    ) -> bytes:
        """Render the certificate for ``record`` and return the PDF bytes.

        Args:
            record: Validated student record
            background: Template image bytes, or None for the plain background
            verification_image: QR code raster from VerificationEncoder
            issued_on: Date printed in the caption (defaults to today)

        Returns:
            PDF content as bytes

        Raises:
            UnsupportedCharactersError: If the fonts can't draw a printed field
            VerificationEncodingError: If the QR raster can't be decoded
        """
        self.check_text(record)

        try:
            qr_image = _load_image(verification_image)
        except Exception as e:
            raise VerificationEncodingError(
                "Verification code image could not be embedded"
            ) from e

        issued_on = issued_on or date.today()
        company_name = record.company_name or DEFAULT_COMPANY_NAME

        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=(self.width, self.height))
        pdf.setTitle(f"Certificate {record.certificate_id}")
        pdf.setSubject(f"Certificate of completion for {record.name}")
        pdf.setAuthor(company_name)

        self._draw_background(pdf, background)

        self._draw_centered(
            pdf,
            record.name,
            self.fonts.serif_bold,
            NAME_FONT_SIZE,
            self.height - NAME_OFFSET,
            gray=0.2,
        )
        self._draw_centered(
            pdf,
            completion_text(record.course_name),
            self.fonts.serif,
            BODY_FONT_SIZE,
            self.height - COMPLETION_OFFSET,
            gray=0.3,
        )
        self._draw_centered(
            pdf,
            company_name,
            self.fonts.serif_bold,
            BODY_FONT_SIZE,
            self.height - COMPANY_OFFSET,
            gray=0.0,
        )
        self._draw_centered(
            pdf,
            date_range_text(record.start_date, record.end_date),
            self.fonts.serif,
            BODY_FONT_SIZE,
            self.height - DATES_OFFSET,
            gray=0.3,
        )

        pdf.drawImage(
            ImageReader(qr_image),
            self.width - QR_SIZE - QR_INSET,
            self.height - QR_SIZE - QR_INSET,
            width=QR_SIZE,
            height=QR_SIZE,
        )

        self._draw_caption(
            pdf, f"Certificate ID: {record.certificate_id}", CERT_ID_OFFSET
        )
        self._draw_caption(
            pdf, f"Issued: {format_issued_date(issued_on)}", ISSUED_OFFSET
        )

        pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    def _draw_background(self, pdf: canvas.Canvas, background: bytes | None) -> None:
        if background is not None:
            try:
                image = _load_image(background)
                pdf.drawImage(
                    ImageReader(image),
                    0,
                    0,
                    width=self.width,
                    height=self.height,
                    mask="auto",
                )
                return
            except Exception:
                logger.warning("certificate.template.embed_failed", exc_info=True)

        pdf.setFillGray(FALLBACK_FILL_GRAY)
        pdf.rect(0, 0, self.width, self.height, stroke=0, fill=1)
        pdf.setStrokeGray(FALLBACK_BORDER_GRAY)
        pdf.setLineWidth(FALLBACK_BORDER_WIDTH)
        pdf.rect(
            FALLBACK_BORDER_INSET,
            FALLBACK_BORDER_INSET,
            self.width - 2 * FALLBACK_BORDER_INSET,
            self.height - 2 * FALLBACK_BORDER_INSET,
            stroke=1,
            fill=0,
        )

    def _draw_centered(
        self,
        pdf: canvas.Canvas,
        text: str,
        font: str,
        size: float,
        y: float,
        *,
        gray: float,
    ) -> None:
        pdf.setFillGray(gray)
        pdf.setFont(font, size)
        pdf.drawString(self.centered_x(text, font, size), y, text)

    def _draw_caption(self, pdf: canvas.Canvas, text: str, offset: float) -> None:
        # Right edge of the caption lines up with the right edge of the QR code
        right = self.width - QR_INSET
        pdf.setFillGray(0.4)
        pdf.setFont(self.fonts.sans, CAPTION_FONT_SIZE)
        pdf.drawString(
            right - self.measurer.measure(text, self.fonts.sans, CAPTION_FONT_SIZE),
            self.height - offset,
            text,
        )
