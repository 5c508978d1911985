"""Certificate generation engine: student record in, verifiable PDF out."""

__version__ = "0.1.0"
