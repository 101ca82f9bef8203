"""Template in, finished report out.

LOAD -> SCAN/BLANK (per content stream) -> RECOMPRESS-IF-CHANGED -> DRAW -> SERIALIZE.
Only placeholder text and the fixed decorative regions are touched; every
other object of the template is written back as it was read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence, Set, Tuple

import fitz

from ...utils.exceptions import TemplateStructureError
from ...utils.logging import get_logger
from .content_scanner import build_font_map
from .drawing import FontLibrary, render_plan
from .font_metrics import DEFAULT_METRICS, TextMetrics
from .layout_engine import LayoutEngine, RenderingRule, TemplateRegion, required_page_count
from .placeholder_blanker import (
    PLACEHOLDER_TOKENS,
    TOKEN_OPENER,
    RecordedPosition,
    blank_and_record,
    needs_scan,
)
from .stream_codec import compress, decompress
from .template_layout import RENDERING_RULES, TEMPLATE_REGIONS

logger = get_logger(__name__)


@dataclass
class GenerationStats:
    pages: int = 0
    streams_scanned: int = 0
    streams_rewritten: int = 0
    positions_recorded: int = 0
    commands_drawn: int = 0
    skipped_tokens: List[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "pages": self.pages,
            "streams_scanned": self.streams_scanned,
            "streams_rewritten": self.streams_rewritten,
            "positions_recorded": self.positions_recorded,
            "commands_drawn": self.commands_drawn,
            "skipped_tokens": list(self.skipped_tokens),
        }


def open_template(template_bytes: bytes) -> fitz.Document:
    if not template_bytes:
        raise TemplateStructureError("Template is empty")
    try:
        doc = fitz.open(stream=template_bytes, filetype="pdf")
    except Exception as exc:  # noqa: BLE001
        raise TemplateStructureError(f"Template could not be opened: {exc}") from exc
    if doc.page_count == 0:
        doc.close()
        raise TemplateStructureError("Template has no pages")
    return doc


def page_font_map(page: fitz.Page) -> dict:
    # get_fonts rows: (xref, ext, type, basefont, resource name, encoding, ...)
    return build_font_map([(entry[4], entry[3]) for entry in page.get_fonts()])


class ReportDocumentAssembler:
    def __init__(
        self,
        fonts: FontLibrary,
        *,
        rules: Mapping[str, RenderingRule] = RENDERING_RULES,
        regions: Sequence[TemplateRegion] = TEMPLATE_REGIONS,
        metrics: TextMetrics = DEFAULT_METRICS,
        link_url: str = "",
        tokens: Sequence[str] = PLACEHOLDER_TOKENS,
    ):
        self.fonts = fonts
        self.rules = rules
        self.regions = tuple(regions)
        self.metrics = metrics
        self.link_url = link_url
        self.tokens = tuple(tokens)
        self.last_stats: Optional[GenerationStats] = None

    def _rewrite_page_streams(
        self,
        doc: fitz.Document,
        page_index: int,
        seen_xrefs: Set[int],
        stats: GenerationStats,
    ) -> List[RecordedPosition]:
        page = doc[page_index]
        xrefs = page.get_contents()
        if not xrefs:
            raise TemplateStructureError(f"Page {page_index} has no content stream")

        font_map = page_font_map(page)
        page_regions = [region for region in self.regions if region.applies_to(page_index)]
        positions: List[RecordedPosition] = []

        for xref in xrefs:
            if xref in seen_xrefs:
                continue
            seen_xrefs.add(xref)

            original = decompress(doc.xref_stream_raw(xref) or b"")
            stats.streams_scanned += 1
            if not needs_scan(original):
                continue
            if TOKEN_OPENER in original and not font_map:
                raise TemplateStructureError(f"Page {page_index} shows placeholders but has no font resources")

            text = original
            for region in page_regions:
                text = region.blank(text)
            text, found = blank_and_record(text, page_index, font_map, self.tokens)
            positions.extend(found)

            if text != original:
                doc.update_stream(xref, compress(text), compress=False)
                doc.xref_set_key(xref, "Filter", "/FlateDecode")
                stats.streams_rewritten += 1
                logger.debug("content stream rewritten", page=page_index, xref=xref, placeholders=len(found))
        return positions

    def _scan(self, doc: fitz.Document, stats: GenerationStats) -> List[RecordedPosition]:
        required = required_page_count(self.regions)
        if doc.page_count < required:
            raise TemplateStructureError(
                f"Template has {doc.page_count} pages; its layout needs at least {required}"
            )
        seen_xrefs: Set[int] = set()
        positions: List[RecordedPosition] = []
        for page_index in range(doc.page_count):
            positions.extend(self._rewrite_page_streams(doc, page_index, seen_xrefs, stats))
        stats.pages = doc.page_count
        stats.positions_recorded = len(positions)
        return positions

    def locate(self, template_bytes: bytes) -> List[RecordedPosition]:
        """Record placeholder positions without drawing or serialising anything."""
        doc = open_template(template_bytes)
        try:
            return self._scan(doc, GenerationStats())
        finally:
            doc.close()

    def generate(
        self,
        template_bytes: bytes,
        replacements: Mapping[str, str],
        *,
        pillar_scores: Optional[Mapping[str, int]] = None,
    ) -> bytes:
        stats = GenerationStats()
        doc = open_template(template_bytes)
        try:
            positions = self._scan(doc, stats)

            engine = LayoutEngine(
                rules=self.rules,
                regions=self.regions,
                metrics=self.metrics,
                link_url=self.link_url,
            )
            plan = engine.plan(
                positions,
                replacements,
                page_count=doc.page_count,
                pillar_scores=pillar_scores,
            )
            stats.commands_drawn = render_plan(doc, plan, self.fonts)
            stats.skipped_tokens = list(engine.skipped)

            output = doc.tobytes(garbage=0)
        finally:
            doc.close()

        self.last_stats = stats
        logger.info("report document assembled", **stats.as_dict())
        return output


def generate(
    template_bytes: bytes,
    replacements: Mapping[str, str],
    *,
    fonts: FontLibrary,
    pillar_scores: Optional[Mapping[str, int]] = None,
    link_url: str = "",
) -> bytes:
    return ReportDocumentAssembler(fonts, link_url=link_url).generate(
        template_bytes, replacements, pillar_scores=pillar_scores
    )


def positions_by_page(positions: Sequence[RecordedPosition]) -> List[Tuple[int, List[RecordedPosition]]]:
    pages: dict = {}
    for position in positions:
        pages.setdefault(position.page_index, []).append(position)
    return sorted(pages.items())
