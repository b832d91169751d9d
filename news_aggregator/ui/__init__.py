"""User interaction helpers."""

from .progress import FileProgress

__all__ = ["FileProgress"]
