"""Storage module."""

from .storage import IRatingStore, RatingStore

__all__ = ["IRatingStore", "RatingStore"]
