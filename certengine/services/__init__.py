"""Service layer for business logic.

Services encapsulate the generation pipeline:
- ArtifactStore: reading students and storing their certificates
- CertificateGenerator: load -> render -> persist orchestration

Layer hierarchy:
    CLI / callers -> Services (pipeline) -> Repositories (Database)
                                         -> Rendering (PDF bytes)

Services should:
- Contain all business rules and validation
- Orchestrate calls to repositories and renderers
- Raise the typed errors in certengine.errors

Services should NOT:
- Directly execute SQL queries (use repositories)
- Retry failed operations
"""

from certengine.services.artifact_store import ArtifactStore
from certengine.services.certificates_service import (
    CertificateGenerator,
    CertificateRenderer,
    build_certificate_generator,
)

__all__ = [
    "ArtifactStore",
    "CertificateGenerator",
    "CertificateRenderer",
    "build_certificate_generator",
]
