"""Execute a :class:`DrawPlan` on PyMuPDF pages with embedded font programs."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Tuple

import fitz

from ...utils.exceptions import FontEmbeddingError
from ...utils.logging import get_logger
from .content_scanner import FillColor
from .draw_commands import DrawCommand, DrawPlan, FilledCircle, FilledRect, LinkArea, TextRun
from .font_metrics import KNOWN_FONTS, FontMetrics, TextMetrics, metrics_from_font_buffer

logger = get_logger(__name__)

FONT_FILES: Mapping[str, str] = {identity: f"{identity}.ttf" for identity in KNOWN_FONTS}


def _font_alias(identity: str) -> str:
    # Page resource names must not collide with the Base14 short names fitz reserves.
    return "Sc" + identity.replace("-", "")


class FontLibrary:
    """Font identity -> font program bytes, read once and shared read-only."""

    def __init__(self, buffers: Mapping[str, bytes]):
        self._buffers: Dict[str, bytes] = dict(buffers)

    @classmethod
    def from_directory(cls, directory: Path, identities: Iterable[str]) -> "FontLibrary":
        buffers: Dict[str, bytes] = {}
        for identity in identities:
            path = Path(directory) / FONT_FILES.get(identity, f"{identity}.ttf")
            try:
                buffers[identity] = path.read_bytes()
            except OSError as exc:
                raise FontEmbeddingError(identity, f"cannot read {path}: {exc}") from exc
        library = cls(buffers)
        library.validate()
        return library

    @property
    def identities(self) -> Tuple[str, ...]:
        return tuple(self._buffers)

    def buffer(self, identity: str) -> bytes:
        try:
            return self._buffers[identity]
        except KeyError:
            raise FontEmbeddingError(identity, "no font program loaded") from None

    def validate(self) -> None:
        """Parse every program once so corrupt files fail before any document work."""
        for identity, data in self._buffers.items():
            if not data:
                raise FontEmbeddingError(identity, "font program is empty")
            try:
                fitz.Font(fontbuffer=data)
            except Exception as exc:  # noqa: BLE001
                raise FontEmbeddingError(identity, str(exc)) from exc

    def metrics(self, base: TextMetrics) -> TextMetrics:
        """``base`` with tables measured from the loaded programs layered on top."""
        tables: Dict[str, FontMetrics] = {
            identity: metrics_from_font_buffer(data) for identity, data in self._buffers.items()
        }
        return base.with_tables(tables)


def color_spec(color: FillColor) -> Tuple[float, ...]:
    """fitz colour tuple: one component for gray, four for CMYK."""
    return tuple(color.components)


class PageCanvas:
    """Draws onto one page in PDF user space (origin bottom-left)."""

    def __init__(self, page: fitz.Page, fonts: FontLibrary):
        self.page = page
        self.fonts = fonts
        self._embedded: Dict[str, str] = {}
        self._matrix = page.transformation_matrix

    @property
    def embedded_fonts(self) -> Tuple[str, ...]:
        return tuple(sorted(self._embedded))

    def point(self, x: float, y: float) -> fitz.Point:
        return fitz.Point(x, y) * self._matrix

    def rect(self, x0: float, y0: float, x1: float, y1: float) -> fitz.Rect:
        return fitz.Rect(self.point(x0, y0), self.point(x1, y1)).normalize()

    def font_alias(self, identity: str) -> str:
        alias = self._embedded.get(identity)
        if alias is not None:
            return alias
        alias = _font_alias(identity)
        buffer = self.fonts.buffer(identity)
        try:
            self.page.insert_font(fontname=alias, fontbuffer=buffer)
        except Exception as exc:  # noqa: BLE001
            raise FontEmbeddingError(identity, str(exc)) from exc
        self._embedded[identity] = alias
        return alias

    def draw_text(self, run: TextRun) -> None:
        if not run.text:
            return
        self.page.insert_text(
            self.point(run.x, run.y),
            run.text,
            fontname=self.font_alias(run.font),
            fontsize=run.size,
            color=color_spec(run.color),
        )

    def draw_rect(self, command: FilledRect) -> None:
        fill = color_spec(command.color)
        self.page.draw_rect(
            self.rect(command.x, command.y, command.x + command.width, command.y + command.height),
            color=None,
            fill=fill,
            fill_opacity=command.opacity,
            width=0,
        )

    def draw_circle(self, command: FilledCircle) -> None:
        self.page.draw_circle(
            self.point(command.center_x, command.center_y),
            command.radius,
            color=None,
            fill=color_spec(command.color),
            fill_opacity=command.opacity,
            width=0,
        )

    def add_link(self, command: LinkArea) -> None:
        self.page.insert_link(
            {
                "kind": fitz.LINK_URI,
                "from": self.rect(*command.rect),
                "uri": command.uri,
            }
        )

    def execute(self, command: DrawCommand) -> None:
        if isinstance(command, TextRun):
            self.draw_text(command)
        elif isinstance(command, FilledRect):
            self.draw_rect(command)
        elif isinstance(command, FilledCircle):
            self.draw_circle(command)
        elif isinstance(command, LinkArea):
            self.add_link(command)
        else:
            raise TypeError(f"Unsupported draw command: {command!r}")


def render_plan(doc: fitz.Document, plan: DrawPlan, fonts: FontLibrary) -> int:
    """Draw every command of ``plan``; returns the number executed."""
    canvases: Dict[int, PageCanvas] = {}
    executed = 0
    for command in plan.ordered():
        canvas: Optional[PageCanvas] = canvases.get(command.page_index)
        if canvas is None:
            canvas = PageCanvas(doc[command.page_index], fonts)
            canvases[command.page_index] = canvas
        canvas.execute(command)
        executed += 1
    for page_index, canvas in canvases.items():
        if canvas.embedded_fonts:
            logger.debug("fonts embedded", page=page_index, fonts=canvas.embedded_fonts)
    return executed
