"""Dialogue module."""

from .engine import DialogEngine, IDialogEngine

__all__ = ["DialogEngine", "IDialogEngine"]
