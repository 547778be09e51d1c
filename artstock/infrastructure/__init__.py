"""Infrastructure layer implementations."""

from artstock.infrastructure import storage

__all__ = ["storage"]
