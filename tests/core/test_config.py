"""Unit tests for core.config module.

Tests cover:
- Settings model_validator checks
- company template table normalization
- asset_search_paths parsing and defaults
- get_settings / clear_settings_cache lru_cache behavior
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from certengine.core.config import Settings, clear_settings_cache, get_settings

SQLITE_URL = "sqlite+aiosqlite:///:memory:"


# ---------------------------------------------------------------------------
# Settings validation
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestSettingsValidation:
    def test_requires_database_url(self):
        with pytest.raises(ValidationError, match="Database configuration"):
            Settings(database_url="")

    def test_requires_default_template(self):
        with pytest.raises(ValidationError, match="DEFAULT_TEMPLATE"):
            Settings(database_url=SQLITE_URL, default_template="")

    def test_defaults(self):
        settings = Settings(database_url=SQLITE_URL)

        assert settings.default_template == "template1.png"
        assert settings.company_templates == {
            "addwise tech innovations": "template2.png"
        }
        assert settings.db_pool_size == 5
        assert settings.db_echo is False
        assert settings.certificate_serif_font == ""
        assert settings.certificate_sans_font == ""

    def test_is_sqlite(self):
        assert Settings(database_url=SQLITE_URL).is_sqlite is True
        assert (
            Settings(database_url="postgresql+asyncpg://localhost/certs").is_sqlite
            is False
        )


@pytest.mark.unit
class TestCompanyTemplates:
    def test_keys_are_lowercased(self):
        settings = Settings(
            database_url=SQLITE_URL,
            company_templates={"Acme Corp": "acme.png", "GLOBEX": "globex.png"},
        )

        assert settings.company_templates == {
            "acme corp": "acme.png",
            "globex": "globex.png",
        }

    def test_reads_json_from_environment(self, monkeypatch):
        monkeypatch.setenv("COMPANY_TEMPLATES", '{"Initech": "initech.png"}')

        settings = Settings(database_url=SQLITE_URL)

        assert settings.company_templates == {"initech": "initech.png"}


@pytest.mark.unit
class TestAssetSearchPaths:
    def test_defaults_to_public_certificates_then_cwd(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)

        settings = Settings(database_url=SQLITE_URL)

        assert settings.asset_search_paths == [
            tmp_path / "public" / "certificates",
            tmp_path,
        ]

    def test_parses_comma_separated_dirs_in_order(self):
        settings = Settings(
            database_url=SQLITE_URL,
            certificate_asset_dirs="/srv/assets, ./public/certificates ,",
        )

        assert settings.asset_search_paths == [
            Path("/srv/assets"),
            Path("./public/certificates"),
        ]


@pytest.mark.unit
class TestGetSettings:
    def test_is_cached(self):
        assert get_settings() is get_settings()

    def test_clear_settings_cache_picks_up_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./first.db")
        clear_settings_cache()
        first = get_settings()

        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./second.db")
        clear_settings_cache()
        second = get_settings()

        assert first.database_url.endswith("first.db")
        assert second.database_url.endswith("second.db")
