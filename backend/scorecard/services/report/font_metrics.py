"""Glyph advance tables and the text measuring/wrapping built on them.

Widths are WinAnsi advance widths in 1/1000 em, taken from the template's
font dictionaries. Measuring never needs the font program itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import fitz

# A4 width in PDF points, as authored in the template.
PAGE_WIDTH = 595.275

FALLBACK_EM_FRACTION = 0.5


@dataclass(frozen=True)
class FontMetrics:
    first_char: int
    last_char: int
    default_width: int
    widths: Tuple[int, ...]

    def advance(self, char: str) -> int:
        index = ord(char) - self.first_char
        if 0 <= index < len(self.widths) and self.widths[index]:
            return self.widths[index]
        return self.default_width


FONT_TABLES: Mapping[str, FontMetrics] = MappingProxyType({
    "Roboto-Bold": FontMetrics(
        first_char=32,
        last_char=125,
        default_width=500,
        widths=(
            249, 0, 0, 0, 0, 0, 656, 0, 0, 0, 0, 0, 0, 0, 0, 0,
            574, 574, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0,
            0, 673, 638, 654, 650, 0, 548, 0, 0, 0, 0, 0, 542, 876, 706, 690,
            645, 0, 638, 615, 619, 658, 654, 875, 0, 618, 0, 0, 0, 0, 0, 446,
            0, 536, 563, 521, 0, 541, 358, 571, 560, 265, 0, 534, 265, 866, 560, 565,
            563, 0, 365, 514, 338, 560, 505, 0, 509, 502, 0, 330, 0, 330,
        ),
    ),
    "Roboto-Regular": FontMetrics(
        first_char=32,
        last_char=125,
        default_width=500,
        widths=(
            248, 0, 0, 0, 0, 0, 0, 174, 342, 348, 0, 0, 196, 276, 263, 412,
            562, 562, 562, 0, 0, 562, 562, 0, 0, 0, 242, 0, 0, 0, 0, 0,
            0, 652, 623, 651, 656, 0, 553, 0, 0, 272, 0, 0, 538, 873, 713, 0,
            631, 0, 0, 593, 597, 0, 0, 0, 0, 0, 265, 0, 265, 0, 451, 0,
            544, 561, 523, 564, 530, 347, 561, 551, 243, 0, 507, 243, 876, 552, 570,
            561, 0, 338, 516, 327, 551, 484, 751, 496, 473, 0, 338, 0, 338,
        ),
    ),
    "Roboto-Medium": FontMetrics(
        first_char=32,
        last_char=125,
        default_width=500,
        widths=(
            249, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0,
            0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0,
            0, 0, 0, 0, 0, 0, 549, 0, 0, 0, 0, 0, 0, 875, 710, 0,
            0, 0, 0, 604, 0, 652, 0, 0, 0, 0, 0, 0, 0, 0, 0, 451,
            0, 541, 0, 523, 0, 537, 0, 567, 0, 0, 0, 522, 255, 870, 556, 569,
            0, 0, 352, 0, 333, 556, 0, 0, 0, 487, 0, 335, 0, 335,
        ),
    ),
    "Archivo-ExtraBold": FontMetrics(
        first_char=32,
        last_char=125,
        default_width=500,
        widths=(
            189, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0,
            0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0,
            0, 746, 745, 752, 755, 0, 0, 0, 787, 0, 0, 0, 623, 914, 787, 0,
            698, 0, 750, 697, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 534,
            0, 616, 0, 612, 0, 619, 0, 632, 629, 288, 0, 610, 288, 937, 629, 635,
            633, 0, 407, 579, 385, 629, 574, 859, 0, 574, 0, 391, 0, 391,
        ),
    ),
    "Archivo-Bold": FontMetrics(
        first_char=32,
        last_char=121,
        default_width=500,
        widths=(
            196, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0,
            595, 0, 596, 596, 0, 595, 596, 596, 0, 0, 0, 0, 0, 0, 0, 0,
            0, 724, 722, 0, 739, 0, 622, 802, 0, 0, 0, 0, 0, 0, 0, 793,
            681, 0, 0, 679, 0, 0, 0, 0, 0, 699, 0, 0, 0, 0, 0, 0,
            580, 608, 573, 608, 584, 0, 607, 602, 267, 0, 570, 267, 891, 602, 613,
            608, 0, 380, 556, 342, 601, 547, 798, 0, 547,
        ),
    ),
})


def metrics_from_font_buffer(buffer: bytes, *, first_char: int = 32, last_char: int = 255) -> FontMetrics:
    """Build a table from a real font program (codes ``first_char``..``last_char``)."""
    font = fitz.Font(fontbuffer=buffer)
    widths: List[int] = []
    for code in range(first_char, last_char + 1):
        if font.has_glyph(code):
            widths.append(int(round(font.glyph_advance(code) * 1000)))
        else:
            widths.append(0)
    default_width = widths[ord("n") - first_char] or 500
    return FontMetrics(
        first_char=first_char,
        last_char=last_char,
        default_width=default_width,
        widths=tuple(widths),
    )


class TextMetrics:
    """Read-only collection of advance tables keyed by font identity."""

    def __init__(self, tables: Optional[Mapping[str, FontMetrics]] = None) -> None:
        self._tables: Mapping[str, FontMetrics] = MappingProxyType(
            dict(FONT_TABLES if tables is None else tables)
        )

    @property
    def fonts(self) -> Sequence[str]:
        return tuple(self._tables)

    def with_tables(self, overrides: Mapping[str, FontMetrics]) -> "TextMetrics":
        merged: Dict[str, FontMetrics] = dict(self._tables)
        merged.update(overrides)
        return TextMetrics(merged)

    def width(self, text: str, font: str, size: float) -> float:
        metrics = self._tables.get(font)
        if metrics is None:
            # A missing table must not abort a report.
            return len(text) * FALLBACK_EM_FRACTION * size
        total = sum(metrics.advance(char) for char in text)
        return total / 1000.0 * size

    def wrap(self, text: str, font: str, size: float, max_width: float) -> List[str]:
        """Greedy word wrap; an over-long word keeps a line to itself."""
        lines: List[str] = []
        current = ""
        for word in text.split():
            candidate = f"{current} {word}" if current else word
            if current and self.width(candidate, font, size) > max_width:
                lines.append(current)
                current = word
            else:
                current = candidate
        if current:
            lines.append(current)
        return lines


DEFAULT_METRICS = TextMetrics()


def text_width(text: str, font: str, size: float) -> float:
    return DEFAULT_METRICS.width(text, font, size)


def wrap_text(text: str, font: str, size: float, max_width: float) -> List[str]:
    return DEFAULT_METRICS.wrap(text, font, size, max_width)


# Resolution order matters: the first name contained in a BaseFont wins.
KNOWN_FONTS: Tuple[str, ...] = (
    "Roboto-Medium",
    "Roboto-Bold",
    "Roboto-Regular",
    "Archivo-ExtraBold",
    "Archivo-Bold",
)


def resolve_font_identity(base_font: str) -> Optional[str]:
    """Map a (possibly subset-prefixed) BaseFont name to a known font identity."""
    for identity in KNOWN_FONTS:
        if identity in base_font:
            return identity
    return None
