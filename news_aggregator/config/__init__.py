"""Configuration package exports."""

from .loader import ConfigLoader, read_counted_lines
from .models import RunConfig, Vocabulary

__all__ = ["ConfigLoader", "RunConfig", "Vocabulary", "read_counted_lines"]
