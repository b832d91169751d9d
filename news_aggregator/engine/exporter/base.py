"""Exporter Service Provider Interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..report import Report


class BaseExporter(ABC):
    """Uniform exporter contract for finished reports."""

    @abstractmethod
    def export(self, report: Report) -> None:
        """Persist a finished report."""

    def close(self) -> None:
        """Release underlying resources."""


__all__ = ["BaseExporter"]
