"""Certificate generation pipeline.

This module handles certificate business logic:
- Loading and validating the student record
- Rendering the PDF (template lookup, QR code, layout)
- Storing the finished document against the student
- Framing stored documents for download

Concurrent generations for the same student are not serialized; each run
overwrites the certificate and the last write wins.
"""

import asyncio
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from certengine.core.config import Settings
from certengine.core.logger import get_logger
from certengine.rendering.certificates import CertificateFonts, CertificateLayout
from certengine.rendering.templates import DirectoryAssetProvider, TemplateResolver
from certengine.rendering.verification import VerificationEncoder
from certengine.schemas import (
    CertificateDownload,
    CertificateStatus,
    GenerationResult,
    StudentRecord,
)
from certengine.services.artifact_store import ArtifactStore

logger = get_logger(__name__)


class CertificateRenderer:
    """Renders validated records to PDF bytes. Stateless and thread-safe."""

    def __init__(
        self,
        resolver: TemplateResolver,
        encoder: VerificationEncoder,
        layout: CertificateLayout,
    ) -> None:
        self.resolver = resolver
        self.encoder = encoder
        self.layout = layout

    def render(self, record: StudentRecord, *, issued_on: date | None = None) -> bytes:
        """Render the PDF for an already validated record.

        Blocking; CertificateGenerator.generate() runs this in a worker thread.

        Raises:
            UnsupportedCharactersError: If the fonts can't draw a printed field
            VerificationEncodingError: If the QR code can't be produced
        """
        self.layout.check_text(record)
        verification_image = self.encoder.encode(record.certificate_id)
        background = self.resolver.resolve(record.company_name)
        return self.layout.compose(
            record, background, verification_image, issued_on=issued_on
        )


class CertificateGenerator:
    """Turns a student ID into a stored certificate PDF."""

    def __init__(self, store: ArtifactStore, renderer: CertificateRenderer) -> None:
        self.store = store
        self.renderer = renderer

    async def generate(self, student_id: int) -> GenerationResult:
        """Generate and store the certificate for a student.

        Any failure leaves the previously stored certificate (or its absence)
        untouched.

        Raises:
            StudentNotFoundError: No such student
            CertificateValidationError: Record lacks name or certificate_id, or
                has characters the certificate fonts can't draw
            VerificationEncodingError: QR code generation failed
            CertificatePersistenceError: Datastore read or write failed
        """
        record = await self.store.load_for_generation(student_id)

        # CPU-bound PDF rendering runs off the event loop
        loop = asyncio.get_running_loop()
        content = await loop.run_in_executor(None, self.renderer.render, record)

        result = await self.store.persist(student_id, content)

        logger.info(
            "certificate.generated",
            student_id=student_id,
            certificate_id=result.certificate_id,
            byte_size=result.byte_size,
        )
        return result

    async def download(self, student_id: int) -> CertificateDownload:
        """Get the stored certificate framed for download.

        Raises:
            StudentNotFoundError: No such student
            CertificateNotGeneratedError: Nothing generated yet
            CertificatePersistenceError: Datastore read failed
        """
        artifact = await self.store.fetch_artifact(student_id)
        return CertificateDownload(
            content=artifact.content,
            student_name=artifact.student_name,
            certificate_id=artifact.certificate_id,
        )

    async def status(self, student_id: int) -> CertificateStatus:
        return await self.store.status(student_id)


def build_template_resolver(settings: Settings) -> TemplateResolver:
    return TemplateResolver(
        providers=[
            DirectoryAssetProvider(path) for path in settings.asset_search_paths
        ],
        templates=settings.company_templates,
        default_asset=settings.default_template,
    )


def build_certificate_renderer(settings: Settings) -> CertificateRenderer:
    return CertificateRenderer(
        resolver=build_template_resolver(settings),
        encoder=VerificationEncoder(),
        layout=CertificateLayout(
            fonts=CertificateFonts.from_files(
                serif=settings.certificate_serif_font or None,
                serif_bold=settings.certificate_serif_bold_font or None,
                sans=settings.certificate_sans_font or None,
            )
        ),
    )


def build_certificate_generator(
    settings: Settings,
    session_maker: async_sessionmaker[AsyncSession],
) -> CertificateGenerator:
    """Wire the generator from settings and a session factory."""
    return CertificateGenerator(
        store=ArtifactStore(session_maker),
        renderer=build_certificate_renderer(settings),
    )
