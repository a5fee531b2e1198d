"""Router exports for FastAPI composition."""

from . import diary

__all__ = ["diary"]
