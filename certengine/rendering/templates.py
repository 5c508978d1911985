"""Background template lookup.

Company names map to template image names through a table supplied at
construction. The image itself is fetched from the first provider that has it;
when none does, the caller draws a plain background instead.
"""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol

from certengine.core.logger import get_logger

logger = get_logger(__name__)


class AssetProvider(Protocol):
    """A place template images can be loaded from."""

    def fetch(self, asset_name: str) -> bytes | None:
        """Return the asset bytes, or None if this provider doesn't have it."""
        ...


class DirectoryAssetProvider:
    """Loads assets from a directory on the local filesystem."""

    def __init__(self, base_path: Path | str) -> None:
        self.base_path = Path(base_path)

    def fetch(self, asset_name: str) -> bytes | None:
        path = self.base_path / asset_name
        try:
            return path.read_bytes()
        except OSError:
            logger.debug("certificate.template.probe_miss", path=str(path))
            return None

    def __repr__(self) -> str:
        return f"DirectoryAssetProvider({str(self.base_path)!r})"


class TemplateResolver:
    """Picks and loads the background template for a company."""

    def __init__(
        self,
        providers: Sequence[AssetProvider],
        templates: Mapping[str, str],
        default_asset: str,
    ) -> None:
        self.providers = tuple(providers)
        self.templates = {name.lower(): asset for name, asset in templates.items()}
        self.default_asset = default_asset

    def asset_name_for(self, company_name: str | None) -> str:
        if not company_name:
            return self.default_asset
        return self.templates.get(company_name.lower(), self.default_asset)

    def resolve(self, company_name: str | None) -> bytes | None:
        """Return the template image bytes for ``company_name``, or None."""
        asset_name = self.asset_name_for(company_name)
        for provider in self.providers:
            content = provider.fetch(asset_name)
            if content is not None:
                logger.debug(
                    "certificate.template.loaded",
                    asset=asset_name,
                    provider=repr(provider),
                )
                return content

        logger.warning(
            "certificate.template.unavailable",
            asset=asset_name,
            providers=len(self.providers),
        )
        return None
