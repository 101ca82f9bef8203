"""Line-oriented scanner for text placement operators in a content stream.

The template writer emits one operator per line, so each line is parsed on
its own with PyPDF2 and the stream text is otherwise left exactly as written.
Only the operators that affect where and how text is painted are recognised;
anything else passes through without touching the scan state.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from io import BytesIO
from typing import Any, Iterator, List, Mapping, Optional, Sequence, Tuple

from PyPDF2.errors import PdfReadError
from PyPDF2.generic import (
    ArrayObject,
    ByteStringObject,
    ContentStream,
    DecodedStreamObject,
    FloatObject,
    NameObject,
    NumberObject,
    TextStringObject,
)

from .font_metrics import resolve_font_identity

Operation = Tuple[List[Any], bytes]

# Lines not ending in one of these operators never reach the parser.
_OPERATOR_TAIL_RE = re.compile(r"(?:^|[\s)\]>])(Tf|k|g|Tm|T[dD]|TJ|Tj)$")

DEFAULT_FONT = "Roboto-Regular"


class OperatorKind(Enum):
    FONT = "Tf"
    CMYK_FILL = "k"
    GRAY_FILL = "g"
    TEXT_MATRIX = "Tm"
    TEXT_MOVE = "Td"
    SHOW_TEXT_ARRAY = "TJ"
    SHOW_TEXT = "Tj"
    OTHER = "other"


SHOW_TEXT_KINDS = frozenset({OperatorKind.SHOW_TEXT_ARRAY, OperatorKind.SHOW_TEXT})

_NUMERIC_OPERATORS = {
    b"k": (OperatorKind.CMYK_FILL, 4),
    b"g": (OperatorKind.GRAY_FILL, 1),
    b"Tm": (OperatorKind.TEXT_MATRIX, 6),
    b"Td": (OperatorKind.TEXT_MOVE, 2),
    b"TD": (OperatorKind.TEXT_MOVE, 2),
}


@dataclass(frozen=True)
class FillColor:
    """Gray (one component) or process CMYK (four components) fill."""

    components: Tuple[float, ...]

    @classmethod
    def gray(cls, level: float) -> "FillColor":
        return cls((float(level),))

    @classmethod
    def cmyk(cls, c: float, m: float, y: float, k: float) -> "FillColor":
        return cls((float(c), float(m), float(y), float(k)))

    @property
    def is_gray(self) -> bool:
        return len(self.components) == 1


@dataclass
class ScanState:
    scale_x: float = 0.0
    scale_y: float = 0.0
    x: float = 0.0
    y: float = 0.0
    font: str = DEFAULT_FONT
    color: FillColor = field(default_factory=lambda: FillColor.gray(0.0))

    @property
    def font_size(self) -> float:
        return self.scale_x or self.scale_y


@dataclass(frozen=True)
class ScannedOperator:
    line: str
    kind: OperatorKind
    operands: Tuple[Any, ...] = ()
    text: Optional[str] = None

    @property
    def shows_text(self) -> bool:
        return self.kind in SHOW_TEXT_KINDS


def parse_line(line: str) -> List[Operation]:
    """PyPDF2's ``(operands, operator)`` pairs for one line of stream text.

    A line the parser cannot read yields no operations and is treated as
    an operator the scanner does not know.
    """
    stream = DecodedStreamObject()
    stream.set_data(line.encode("latin-1", errors="ignore"))
    try:
        return list(ContentStream(stream, None).operations)
    except (PdfReadError, ValueError, ArithmeticError):
        return []


def _decode_string_operand(operand: Any) -> str:
    if isinstance(operand, TextStringObject):
        return str(operand)
    if isinstance(operand, ByteStringObject):
        return bytes(operand).decode("latin-1")
    return ""


def shown_text(operands: Sequence[Any], operator: bytes) -> Optional[str]:
    """Text painted by a ``Tj``/``TJ`` operation; kerning numbers are dropped."""
    if operator == b"Tj" and len(operands) == 1:
        return _decode_string_operand(operands[0])
    if operator == b"TJ" and len(operands) == 1 and isinstance(operands[0], ArrayObject):
        return "".join(_decode_string_operand(item) for item in operands[0])
    return None


def serialize_operation(operands: Sequence[Any], operator: bytes) -> str:
    buffer = BytesIO()
    for operand in operands:
        operand.write_to_stream(buffer, None)
        buffer.write(b" ")
    buffer.write(operator)
    return buffer.getvalue().decode("latin-1")


def _is_number(operand: Any) -> bool:
    return isinstance(operand, (NumberObject, FloatObject))


def _operator_from(line: str, operands: Sequence[Any], operator: bytes) -> ScannedOperator:
    text = shown_text(operands, operator)
    if text is not None:
        kind = OperatorKind.SHOW_TEXT_ARRAY if operator == b"TJ" else OperatorKind.SHOW_TEXT
        return ScannedOperator(line, kind, text=text)

    if operator == b"Tf":
        if len(operands) == 2 and isinstance(operands[0], NameObject):
            return ScannedOperator(line, OperatorKind.FONT, operands=(str(operands[0]).lstrip("/"),))
        return ScannedOperator(line, OperatorKind.OTHER)

    expected = _NUMERIC_OPERATORS.get(operator)
    if expected and len(operands) == expected[1] and all(_is_number(value) for value in operands):
        return ScannedOperator(line, expected[0], operands=tuple(float(value) for value in operands))
    return ScannedOperator(line, OperatorKind.OTHER)


def classify(line: str) -> ScannedOperator:
    trimmed = line.strip()
    if not _OPERATOR_TAIL_RE.search(trimmed):
        return ScannedOperator(line, OperatorKind.OTHER)

    operations = parse_line(trimmed)
    if len(operations) != 1:
        return ScannedOperator(line, OperatorKind.OTHER)
    operands, operator = operations[0]
    return _operator_from(line, operands, operator)


def extract_show_text(line: str) -> Optional[str]:
    """Rendered text of a show-text line, or ``None`` for any other operator."""
    operator = classify(line)
    return operator.text if operator.shows_text else None


def advance(state: ScanState, operator: ScannedOperator, font_map: Mapping[str, str]) -> None:
    """Apply one operator to ``state``; show-text and unknown lines leave it as is."""
    kind = operator.kind
    if kind is OperatorKind.FONT:
        # An unresolved resource keeps the previous font active.
        resolved = font_map.get(operator.operands[0])
        if resolved:
            state.font = resolved
    elif kind is OperatorKind.CMYK_FILL:
        state.color = FillColor.cmyk(*operator.operands)
    elif kind is OperatorKind.GRAY_FILL:
        state.color = FillColor.gray(operator.operands[0])
    elif kind is OperatorKind.TEXT_MATRIX:
        a, _b, _c, d, e, f = operator.operands
        state.scale_x, state.scale_y = a, d
        state.x, state.y = e, f
    elif kind is OperatorKind.TEXT_MOVE:
        dx, dy = operator.operands
        state.x += dx * state.scale_x
        state.y += dy * state.scale_y


def scan_lines(
    stream: str,
    font_map: Mapping[str, str],
    state: Optional[ScanState] = None,
) -> Iterator[ScannedOperator]:
    """Yield every line's operator, folding it into ``state`` as the walk goes.

    The state passed in (or a fresh one) is mutated in place, so a consumer
    reading it when a show-text operator is yielded sees exactly the
    position, font and colour that operator paints with.
    """
    state = state if state is not None else ScanState()
    for line in stream.split("\n"):
        operator = classify(line)
        advance(state, operator, font_map)
        yield operator


def build_font_map(resources: List[Tuple[str, str]]) -> dict:
    """Resource name -> font identity for ``(resource_name, base_font)`` pairs."""
    mapping = {}
    for resource_name, base_font in resources:
        identity = resolve_font_identity(base_font)
        if identity:
            mapping[resource_name.lstrip("/")] = identity
    return mapping
