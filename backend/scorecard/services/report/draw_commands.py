"""Page drawing commands produced by the layout engine.

Coordinates are PDF user space (origin bottom-left), the same space the
scanner records placeholder positions in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple, Union

from .content_scanner import FillColor

SHAPE_LAYER = 0
TEXT_LAYER = 1
ANNOTATION_LAYER = 2


@dataclass(frozen=True)
class TextRun:
    page_index: int
    x: float
    y: float
    text: str
    font: str
    size: float
    color: FillColor

    layer = TEXT_LAYER


@dataclass(frozen=True)
class FilledRect:
    page_index: int
    x: float
    y: float
    width: float
    height: float
    color: FillColor
    opacity: float = 1.0

    layer = SHAPE_LAYER


@dataclass(frozen=True)
class FilledCircle:
    page_index: int
    center_x: float
    center_y: float
    radius: float
    color: FillColor
    opacity: float = 1.0

    layer = SHAPE_LAYER


@dataclass(frozen=True)
class LinkArea:
    page_index: int
    rect: Tuple[float, float, float, float]
    uri: str

    layer = ANNOTATION_LAYER


DrawCommand = Union[TextRun, FilledRect, FilledCircle, LinkArea]


@dataclass
class DrawPlan:
    commands: List[DrawCommand] = field(default_factory=list)

    def extend(self, commands) -> None:
        self.commands.extend(commands)

    def ordered(self) -> List[DrawCommand]:
        """Per page: shapes, then text, then annotations; emission order kept within a layer."""
        return sorted(self.commands, key=lambda command: (command.page_index, command.layer))

    def for_page(self, page_index: int) -> List[DrawCommand]:
        return [command for command in self.ordered() if command.page_index == page_index]

    def __len__(self) -> int:
        return len(self.commands)
