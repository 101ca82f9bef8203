from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, FrozenSet, List, Mapping, Optional, Sequence, Tuple

from ...utils.logging import get_logger
from .content_scanner import FillColor
from .draw_commands import DrawCommand, DrawPlan, TextRun
from .font_metrics import DEFAULT_METRICS, PAGE_WIDTH, TextMetrics
from .placeholder_blanker import RecordedPosition

logger = get_logger(__name__)


class Alignment(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class RenderingRule:
    """How a token's replacement is drawn; encodes the template author's intent."""

    font: str
    alignment: Alignment = Alignment.LEFT
    multiline: bool = False
    max_width: float = 0.0
    line_height: float = 0.0
    # Right edge for RIGHT alignment, in page coordinates.
    anchor_x: float = 0.0


@dataclass(frozen=True)
class RegionContext:
    page_index: int
    replacements: Mapping[str, str]
    positions: Sequence[RecordedPosition]
    pillar_scores: Mapping[str, int]
    metrics: TextMetrics
    rules: Mapping[str, RenderingRule]
    link_url: str


RegionDraw = Callable[[RegionContext], List[DrawCommand]]


@dataclass(frozen=True)
class TemplateRegion:
    """A page area with its own blanking transform and, optionally, its own redraw.

    Tokens listed in ``claims`` are left to the region's ``draw`` on matching
    pages instead of the generic per-position layout.
    """

    name: str
    applies_to: Callable[[int], bool]
    blank: Callable[[str], str]
    claims: FrozenSet[str] = frozenset()
    draw: Optional[RegionDraw] = None

    @property
    def page_index(self) -> Optional[int]:
        """The single page this region is bound to, if it is bound to one."""
        return getattr(self.applies_to, "page_index", None)


@dataclass(frozen=True)
class OnPage:
    page_index: int

    def __call__(self, index: int) -> bool:
        return index == self.page_index


def on_page(page_index: int) -> OnPage:
    return OnPage(page_index)


def required_page_count(regions: Sequence[TemplateRegion]) -> int:
    """Fewest pages a template needs for every page-bound region to have its page."""
    bound = [region.page_index for region in regions if region.page_index is not None]
    return max(bound) + 1 if bound else 0


def every_page(_index: int) -> bool:
    return True


def centered_x(width: float, center: float = PAGE_WIDTH / 2) -> float:
    return center - width / 2


def layout_lines(
    lines: Sequence[str],
    *,
    page_index: int,
    x: float,
    y: float,
    font: str,
    size: float,
    color: FillColor,
    line_spacing: float,
    metrics: TextMetrics,
    center: Optional[float] = None,
) -> List[TextRun]:
    """Stack lines top to bottom from ``y``; centre each one when ``center`` is given."""
    runs: List[TextRun] = []
    for index, line in enumerate(lines):
        line_x = x if center is None else centered_x(metrics.width(line, font, size), center)
        runs.append(TextRun(page_index, line_x, y - index * line_spacing, line, font, size, color))
    return runs


def layout_text(
    rule: RenderingRule,
    value: str,
    *,
    page_index: int,
    x: float,
    y: float,
    size: float,
    color: FillColor,
    metrics: TextMetrics,
) -> List[TextRun]:
    font = rule.font
    if rule.multiline:
        lines = metrics.wrap(value, font, size, rule.max_width)
        center = PAGE_WIDTH / 2 if rule.alignment is Alignment.CENTER else None
        return layout_lines(
            lines,
            page_index=page_index,
            x=x,
            y=y,
            font=font,
            size=size,
            color=color,
            line_spacing=size * rule.line_height,
            metrics=metrics,
            center=center,
        )
    if rule.alignment is Alignment.CENTER:
        x = centered_x(metrics.width(value, font, size))
    elif rule.alignment is Alignment.RIGHT:
        x = rule.anchor_x - metrics.width(value, font, size)
    return [TextRun(page_index, x, y, value, font, size, color)]


def composite_line(
    segments: Sequence[Tuple[str, str]],
    *,
    page_index: int,
    y: float,
    size: float,
    color: FillColor,
    metrics: TextMetrics,
    center: float = PAGE_WIDTH / 2,
) -> List[TextRun]:
    """Lay ``(text, font)`` segments left to right as one line centred on ``center``."""
    total = sum(metrics.width(text, font, size) for text, font in segments)
    x = centered_x(total, center)
    runs: List[TextRun] = []
    for text, font in segments:
        runs.append(TextRun(page_index, x, y, text, font, size, color))
        x += metrics.width(text, font, size)
    return runs


@dataclass
class LayoutEngine:
    rules: Mapping[str, RenderingRule]
    regions: Sequence[TemplateRegion]
    metrics: TextMetrics = DEFAULT_METRICS
    link_url: str = ""
    skipped: List[str] = field(default_factory=list)

    def claiming_region(self, position: RecordedPosition) -> Optional[TemplateRegion]:
        for region in self.regions:
            if position.token in region.claims and region.applies_to(position.page_index):
                return region
        return None

    def layout_position(self, position: RecordedPosition, replacements: Mapping[str, str]) -> List[TextRun]:
        value = replacements.get(position.token)
        if value is None:
            logger.warning(
                "No replacement value for placeholder; leaving it blank",
                token=position.token,
                page=position.page_index,
            )
            self.skipped.append(position.token)
            return []
        rule = self.rules.get(position.token)
        if rule is None:
            logger.warning(
                "No rendering rule for placeholder; skipping draw",
                token=position.token,
                page=position.page_index,
            )
            self.skipped.append(position.token)
            return []
        return layout_text(
            rule,
            value + position.suffix,
            page_index=position.page_index,
            x=position.x,
            y=position.y,
            size=position.font_size,
            color=position.color,
            metrics=self.metrics,
        )

    def plan(
        self,
        positions: Sequence[RecordedPosition],
        replacements: Mapping[str, str],
        *,
        page_count: int,
        pillar_scores: Optional[Mapping[str, int]] = None,
    ) -> DrawPlan:
        plan = DrawPlan()
        for position in positions:
            if self.claiming_region(position) is None:
                plan.extend(self.layout_position(position, replacements))

        for page_index in range(page_count):
            for region in self.regions:
                if region.draw is None or not region.applies_to(page_index):
                    continue
                context = RegionContext(
                    page_index=page_index,
                    replacements=replacements,
                    positions=[
                        position
                        for position in positions
                        if position.page_index == page_index and position.token in region.claims
                    ],
                    pillar_scores=pillar_scores or {},
                    metrics=self.metrics,
                    rules=self.rules,
                    link_url=self.link_url,
                )
                commands = region.draw(context)
                logger.debug("region laid out", region=region.name, page=page_index, commands=len(commands))
                plan.extend(commands)
        return plan
