from __future__ import annotations


class ReportError(Exception):
    """Base class for report generation errors."""


class TemplateStructureError(ReportError):
    """The template is missing a page, content stream or resource entry."""


class FontEmbeddingError(ReportError):
    def __init__(self, font: str, message: str):
        super().__init__(f"Font '{font}' could not be embedded: {message}")
        self.font = font
        self.message = message


class ReportGenerationFailed(ReportError):
    """Single caller-facing failure; carries no parsing details."""

    def __init__(self, message: str = "Report generation failed"):
        super().__init__(message)


class InvalidScorecardData(ReportError, ValueError):
    """Request data cannot produce a report; reported back to the caller as is."""
