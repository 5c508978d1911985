"""Rendering module for presentation concerns.

This module handles all presentation/rendering logic:
- Background template lookup
- QR verification code rasters
- PDF page layout

This separates presentation concerns from business logic in services.
"""

from certengine.rendering.certificates import (
    CertificateFonts,
    CertificateLayout,
    format_date,
)
from certengine.rendering.templates import (
    AssetProvider,
    DirectoryAssetProvider,
    TemplateResolver,
)
from certengine.rendering.verification import VerificationEncoder

__all__ = [
    "AssetProvider",
    "CertificateFonts",
    "CertificateLayout",
    "DirectoryAssetProvider",
    "TemplateResolver",
    "VerificationEncoder",
    "format_date",
]
