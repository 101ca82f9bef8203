from .document_assembler import GenerationStats, ReportDocumentAssembler, generate
from .drawing import FontLibrary
from .report_service import ReportService

__all__ = ["FontLibrary", "GenerationStats", "ReportDocumentAssembler", "ReportService", "generate"]
