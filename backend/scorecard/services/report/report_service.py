from __future__ import annotations

import datetime as dt
import threading
from pathlib import Path
from typing import Optional, Tuple

from ...utils.exceptions import ReportError, ReportGenerationFailed, TemplateStructureError
from ...utils.logging import get_logger
from ..scoring import ScorecardData, build_replacements
from .document_assembler import ReportDocumentAssembler
from .drawing import FontLibrary
from .font_metrics import DEFAULT_METRICS, TextMetrics
from .template_layout import DRAWING_FONTS

logger = get_logger(__name__)


class ReportService:
    """Render scorecard reports from the template and fonts on disk.

    Template and font bytes are read once per process and never mutated
    afterwards; every render works on its own document.
    """

    def __init__(
        self,
        template_path: Path,
        fonts_dir: Path,
        *,
        link_url: str = "",
        measure_font_programs: bool = False,
    ):
        self.template_path = Path(template_path)
        self.fonts_dir = Path(fonts_dir)
        self.link_url = link_url
        self.measure_font_programs = measure_font_programs
        self._lock = threading.Lock()
        self._template: Optional[bytes] = None
        self._fonts: Optional[FontLibrary] = None
        self._metrics: Optional[TextMetrics] = None

    @classmethod
    def from_config(cls, config) -> "ReportService":
        return cls(
            config["TEMPLATE_PATH"],
            config["FONTS_DIR"],
            link_url=config.get("CTA_URL", ""),
            measure_font_programs=bool(config.get("MEASURE_FONT_PROGRAMS", False)),
        )

    def _load(self) -> Tuple[bytes, FontLibrary, TextMetrics]:
        with self._lock:
            if self._template is None:
                try:
                    self._template = self.template_path.read_bytes()
                except OSError as exc:
                    raise TemplateStructureError(f"Template not readable at {self.template_path}: {exc}") from exc
                logger.info("template loaded", path=str(self.template_path), size=len(self._template))
            if self._fonts is None:
                self._fonts = FontLibrary.from_directory(self.fonts_dir, DRAWING_FONTS)
                logger.info("fonts loaded", directory=str(self.fonts_dir), fonts=list(self._fonts.identities))
            if self._metrics is None:
                self._metrics = self._fonts.metrics(DEFAULT_METRICS) if self.measure_font_programs else DEFAULT_METRICS
            return self._template, self._fonts, self._metrics

    def _assembler(self, fonts: FontLibrary, metrics: TextMetrics) -> ReportDocumentAssembler:
        return ReportDocumentAssembler(fonts, metrics=metrics, link_url=self.link_url)

    def assembler(self) -> ReportDocumentAssembler:
        _template, fonts, metrics = self._load()
        return self._assembler(fonts, metrics)

    def render(self, data: ScorecardData, report_date: Optional[dt.date] = None) -> bytes:
        """Produce the finished report; any fatal problem surfaces as :class:`ReportGenerationFailed`."""
        try:
            template, fonts, metrics = self._load()
            replacements = build_replacements(data, report_date)
            output = self._assembler(fonts, metrics).generate(
                template, replacements, pillar_scores=data.pillar_scores
            )
        except ReportError as exc:
            logger.error("report generation failed", error=str(exc), error_type=type(exc).__name__)
            raise ReportGenerationFailed() from exc
        except Exception as exc:  # noqa: BLE001
            logger.exception("unexpected error during report generation")
            raise ReportGenerationFailed() from exc

        return output
