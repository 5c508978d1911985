"""Pytest configuration and shared fixtures.

This module provides:
- A throwaway SQLite database per test (aiosqlite file in tmp_path)
- Session factory fixtures for repository/service tests
- Template asset directories with generated PNG backgrounds
- Pre-wired renderer and generator fixtures
"""

# Set environment variables BEFORE any imports that trigger Settings validation
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import io
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
import reportlab
from PIL import Image
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from certengine.core.config import Settings, clear_settings_cache
from certengine.core.database import Base, create_session_maker
from certengine.rendering.certificates import CertificateLayout
from certengine.rendering.templates import DirectoryAssetProvider, TemplateResolver
from certengine.rendering.verification import VerificationEncoder
from certengine.services.artifact_store import ArtifactStore
from certengine.services.certificates_service import (
    CertificateGenerator,
    CertificateRenderer,
)

# =============================================================================
# Settings
# =============================================================================


@pytest.fixture(autouse=True)
def _clear_settings():
    """Keep the lru_cache'd settings from leaking between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'settings.db'}",
        certificate_asset_dirs=str(tmp_path / "assets"),
    )


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def test_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Create a fresh file-backed SQLite database for each test.

    A file (rather than :memory:) lets concurrent sessions use separate
    connections, the way they would against PostgreSQL.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_maker(test_engine)


@pytest_asyncio.fixture
async def db_session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Provide a database session for each test."""
    async with session_maker() as session:
        yield session
        await session.rollback()


# =============================================================================
# Template Assets
# =============================================================================


def make_png(size: tuple[int, int] = (264, 204), color: str = "#f4e9d0") -> bytes:
    """Build a small solid-colour PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def asset_dir(tmp_path: Path) -> Path:
    """Directory holding both templates."""
    path = tmp_path / "assets"
    path.mkdir()
    (path / "template1.png").write_bytes(make_png(color="#f4e9d0"))
    (path / "template2.png").write_bytes(make_png(color="#d0e4f4"))
    return path


@pytest.fixture
def resolver(asset_dir: Path) -> TemplateResolver:
    return TemplateResolver(
        providers=[DirectoryAssetProvider(asset_dir)],
        templates={"Addwise Tech Innovations": "template2.png"},
        default_asset="template1.png",
    )


@pytest.fixture
def empty_resolver(tmp_path: Path) -> TemplateResolver:
    """Resolver whose every location misses."""
    return TemplateResolver(
        providers=[
            DirectoryAssetProvider(tmp_path / "missing-a"),
            DirectoryAssetProvider(tmp_path / "missing-b"),
        ],
        templates={"Addwise Tech Innovations": "template2.png"},
        default_asset="template1.png",
    )


# =============================================================================
# Pipeline Fixtures
# =============================================================================


@pytest.fixture
def layout() -> CertificateLayout:
    return CertificateLayout()


# Bitstream Vera ships with ReportLab and covers Latin-1 only
REPORTLAB_FONT_DIR = Path(reportlab.__file__).parent / "fonts"


@pytest.fixture
def vera_fonts() -> dict[str, Path]:
    return {
        "serif": REPORTLAB_FONT_DIR / "Vera.ttf",
        "serif_bold": REPORTLAB_FONT_DIR / "VeraBd.ttf",
        "sans": REPORTLAB_FONT_DIR / "Vera.ttf",
    }


@pytest.fixture
def encoder() -> VerificationEncoder:
    return VerificationEncoder()


@pytest.fixture
def renderer(
    resolver: TemplateResolver,
    encoder: VerificationEncoder,
    layout: CertificateLayout,
) -> CertificateRenderer:
    return CertificateRenderer(resolver=resolver, encoder=encoder, layout=layout)


@pytest.fixture
def store(session_maker: async_sessionmaker[AsyncSession]) -> ArtifactStore:
    return ArtifactStore(session_maker)


@pytest.fixture
def generator(
    store: ArtifactStore, renderer: CertificateRenderer
) -> CertificateGenerator:
    return CertificateGenerator(store=store, renderer=renderer)
