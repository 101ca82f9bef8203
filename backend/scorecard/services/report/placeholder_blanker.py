"""Find placeholder tokens in show-text operators, record them and erase them."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from .content_scanner import (
    FillColor,
    ScanState,
    classify,
    parse_line,
    scan_lines,
    serialize_operation,
    shown_text,
)

# Ordered; the first token contained in a run of text wins.
PLACEHOLDER_TOKENS: Tuple[str, ...] = (
    "{{Business_Name}}",
    "{{City_or_Service_Area}}",
    "{{Report_Date}}",
    "{{Total_Score}}",
    "{{Segment_Name}}",
    "{{Segment_One_Liner}}",
    "{{Visibility_Score}}",
    "{{Conversion_Score}}",
    "{{Reputation_Score}}",
    "{{Marketing_Score}}",
    "{{Tracking_Score}}",
    "{{Lowest_Pillar_Name}}",
    "{{Lowest_Pillar_Impact_Statement}}",
    "{{Segment_Description_Block}}",
    "{{Primary_Focus_Area}}",
)

TOKEN_OPENER = "{{"
INTERNAL_NOTE_MARKERS: Tuple[str, ...] = ("Developer Note", "specific segment")
BLANK_SHOW_TEXT = "() Tj"


@dataclass
class RecordedPosition:
    token: str
    page_index: int
    x: float
    y: float
    font_size: float
    font: str
    color: FillColor
    suffix: str = ""


def find_token(text: str, tokens: Sequence[str] = PLACEHOLDER_TOKENS) -> Optional[str]:
    for token in tokens:
        if token in text:
            return token
    return None


def needs_scan(stream: str, markers: Iterable[str] = INTERNAL_NOTE_MARKERS) -> bool:
    return TOKEN_OPENER in stream or any(marker in stream for marker in markers)


def blank_and_record(
    stream: str,
    page_index: int,
    font_map: Mapping[str, str],
    tokens: Sequence[str] = PLACEHOLDER_TOKENS,
) -> Tuple[str, List[RecordedPosition]]:
    """Blank every show-text line holding a token; return the new stream and the hits."""
    if TOKEN_OPENER not in stream:
        return stream, []

    positions: List[RecordedPosition] = []
    output: List[str] = []
    state = ScanState()

    for operator in scan_lines(stream, font_map, state):
        token = find_token(operator.text, tokens) if operator.shows_text else None
        if token is None:
            output.append(operator.line)
            continue

        text = operator.text or ""
        positions.append(
            RecordedPosition(
                token=token,
                page_index=page_index,
                x=state.x,
                y=state.y,
                font_size=state.font_size,
                font=state.font,
                color=state.color,
                suffix=text[text.index(token) + len(token):],
            )
        )
        output.append(_blank_line(operator.line))

    return "\n".join(output), positions


def _blank_line(line: str) -> str:
    body = line.strip()
    if not body:
        return BLANK_SHOW_TEXT
    start = line.index(body)
    return line[:start] + BLANK_SHOW_TEXT + line[start + len(body):]


def _blank_operators_in_line(line: str, predicate: Callable[[str], bool]) -> str:
    operations = parse_line(line)
    hits = []
    for operands, operator in operations:
        text = shown_text(operands, operator)
        hits.append(text is not None and predicate(text))
    if not any(hits):
        return line
    if len(operations) == 1:
        return _blank_line(line)
    # Several operators share the line; only this line is rewritten.
    return " ".join(
        BLANK_SHOW_TEXT if hit else serialize_operation(operands, operator)
        for hit, (operands, operator) in zip(hits, operations)
    )


def blank_show_text_where(stream: str, predicate: Callable[[str], bool]) -> str:
    """Blank any show-text operator (anywhere in the stream) whose text matches."""
    lines = stream.split("\n")
    for index, line in enumerate(lines):
        if "Tj" in line or "TJ" in line:
            lines[index] = _blank_operators_in_line(line, predicate)
    return "\n".join(lines)


def blank_internal_notes(stream: str, markers: Sequence[str] = INTERNAL_NOTE_MARKERS) -> str:
    return blank_show_text_where(stream, lambda text: any(marker in text for marker in markers))


def remove_xobject_draws(stream: str, names: Iterable[str]) -> str:
    for name in names:
        stream = re.sub(rf"/{re.escape(name)}\s+Do\b", "", stream)
    return stream


def blank_text_block_containing(stream: str, marker: str) -> str:
    """Blank every show-text line of the BT ... ET block whose text includes ``marker``."""
    if marker not in stream:
        return stream

    lines = stream.split("\n")
    block_start = -1
    target_start = -1
    for index, line in enumerate(lines):
        if line.strip() == "BT":
            block_start = index
        if marker in line:
            target_start = block_start
            break
    if target_start == -1:
        return stream

    for index in range(target_start + 1, len(lines)):
        if lines[index].strip() == "ET":
            break
        if classify(lines[index]).shows_text:
            lines[index] = _blank_line(lines[index])
    return "\n".join(lines)
