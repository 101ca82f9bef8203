"""Fixed layout knowledge for the Dominance Playbook template.

Coordinates below are PDF points measured on the authored template
(A4, origin bottom-left). Page indices are zero-based.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import List, Mapping, Tuple

from ...utils.logging import get_logger
from .content_scanner import FillColor
from .draw_commands import DrawCommand, FilledCircle, FilledRect, LinkArea, TextRun
from .font_metrics import PAGE_WIDTH
from .layout_engine import (
    Alignment,
    RegionContext,
    RenderingRule,
    TemplateRegion,
    centered_x,
    composite_line,
    every_page,
    layout_lines,
    on_page,
)
from .placeholder_blanker import (
    blank_internal_notes,
    blank_show_text_where,
    blank_text_block_containing,
    remove_xobject_draws,
)

logger = get_logger(__name__)

ROBOTO_REGULAR = "Roboto-Regular"
ROBOTO_BOLD = "Roboto-Bold"
ROBOTO_MEDIUM = "Roboto-Medium"
ARCHIVO_EXTRA_BOLD = "Archivo-ExtraBold"

# Every font the rules and region draws paint with; only these must be on disk.
DRAWING_FONTS: Tuple[str, ...] = (ROBOTO_MEDIUM, ROBOTO_BOLD, ROBOTO_REGULAR, ARCHIVO_EXTRA_BOLD)

BUSINESS_NAME = "{{Business_Name}}"
CITY = "{{City_or_Service_Area}}"
REPORT_DATE = "{{Report_Date}}"
TOTAL_SCORE = "{{Total_Score}}"
SEGMENT_NAME = "{{Segment_Name}}"
SEGMENT_ONE_LINER = "{{Segment_One_Liner}}"
VISIBILITY_SCORE = "{{Visibility_Score}}"
CONVERSION_SCORE = "{{Conversion_Score}}"
REPUTATION_SCORE = "{{Reputation_Score}}"
MARKETING_SCORE = "{{Marketing_Score}}"
TRACKING_SCORE = "{{Tracking_Score}}"
LOWEST_PILLAR_NAME = "{{Lowest_Pillar_Name}}"
LOWEST_PILLAR_IMPACT = "{{Lowest_Pillar_Impact_Statement}}"
SEGMENT_DESCRIPTION = "{{Segment_Description_Block}}"
PRIMARY_FOCUS_AREA = "{{Primary_Focus_Area}}"

DARK_TEXT = FillColor.cmyk(0.732, 0.672, 0.657, 0.82)
BRAND_BLUE = FillColor.cmyk(0.874, 0.526, 0, 0)
ACCENT_BLUE = FillColor.cmyk(0.877, 0.533, 0, 0)
HIGHLIGHT_YELLOW = FillColor.cmyk(0.011, 0.17, 0.981, 0)
WHITE = FillColor.cmyk(0, 0, 0, 0)

# Pillar scores are drawn flush against this right edge.
SCORE_RIGHT_EDGE = 530.0

_left = RenderingRule
RENDERING_RULES: Mapping[str, RenderingRule] = MappingProxyType({
    BUSINESS_NAME: _left(ARCHIVO_EXTRA_BOLD),
    CITY: _left(ARCHIVO_EXTRA_BOLD),
    REPORT_DATE: _left(ARCHIVO_EXTRA_BOLD),
    TOTAL_SCORE: RenderingRule(ROBOTO_BOLD, Alignment.CENTER),
    SEGMENT_NAME: RenderingRule(ROBOTO_MEDIUM, Alignment.CENTER),
    SEGMENT_ONE_LINER: RenderingRule(ROBOTO_BOLD, Alignment.CENTER, multiline=True, max_width=450, line_height=1.2),
    VISIBILITY_SCORE: RenderingRule(ROBOTO_BOLD, Alignment.RIGHT, anchor_x=SCORE_RIGHT_EDGE),
    CONVERSION_SCORE: RenderingRule(ROBOTO_BOLD, Alignment.RIGHT, anchor_x=SCORE_RIGHT_EDGE),
    REPUTATION_SCORE: RenderingRule(ROBOTO_BOLD, Alignment.RIGHT, anchor_x=SCORE_RIGHT_EDGE),
    MARKETING_SCORE: RenderingRule(ROBOTO_BOLD, Alignment.RIGHT, anchor_x=SCORE_RIGHT_EDGE),
    TRACKING_SCORE: RenderingRule(ROBOTO_BOLD, Alignment.RIGHT, anchor_x=SCORE_RIGHT_EDGE),
    LOWEST_PILLAR_NAME: _left(ARCHIVO_EXTRA_BOLD),
    LOWEST_PILLAR_IMPACT: RenderingRule(ROBOTO_REGULAR, Alignment.CENTER, multiline=True, max_width=450, line_height=1.3),
    SEGMENT_DESCRIPTION: RenderingRule(ROBOTO_REGULAR, multiline=True, max_width=380, line_height=1.35),
    PRIMARY_FOCUS_AREA: _left(ROBOTO_REGULAR),
})


def score_opacity(score: float) -> float:
    """Dot weight for a 0-20 pillar score."""
    if score >= 16:
        return 1.0
    if score >= 11:
        return 0.75
    return 0.5


# -- page 2: total score ring ------------------------------------------------

SCORE_RING_PAGE = 1
RING_CENTER = (297.637, 475.138)
SCORE_SIZE = 52
SCORE_LABEL = "out of 100"
SCORE_LABEL_SIZE = 20
CAP_HEIGHT_RATIO = 0.71
SCORE_LABEL_GAP = 5


def _blank_score_ring(stream: str) -> str:
    # X10 is the card background behind the ring; the ring itself (X11) stays.
    stream = remove_xobject_draws(stream, ["X10"])
    return blank_show_text_where(stream, lambda text: text == SCORE_LABEL)


def _draw_score_ring(context: RegionContext) -> List[DrawCommand]:
    score = context.replacements.get(TOTAL_SCORE)
    if score is None:
        logger.warning("Total score missing; score ring left empty", page=context.page_index)
        return []

    metrics = context.metrics
    center_x, center_y = RING_CENTER
    score_cap = SCORE_SIZE * CAP_HEIGHT_RATIO
    label_cap = SCORE_LABEL_SIZE * CAP_HEIGHT_RATIO
    total_height = score_cap + SCORE_LABEL_GAP + label_cap

    score_baseline = center_y + total_height / 2 - score_cap
    label_baseline = score_baseline - SCORE_LABEL_GAP - label_cap

    return [
        TextRun(
            context.page_index,
            centered_x(metrics.width(score, ROBOTO_BOLD, SCORE_SIZE), center_x),
            score_baseline,
            score,
            ROBOTO_BOLD,
            SCORE_SIZE,
            DARK_TEXT,
        ),
        TextRun(
            context.page_index,
            centered_x(metrics.width(SCORE_LABEL, ROBOTO_BOLD, SCORE_LABEL_SIZE), center_x),
            label_baseline,
            SCORE_LABEL,
            ROBOTO_BOLD,
            SCORE_LABEL_SIZE,
            BRAND_BLUE,
        ),
    ]


# -- page 3: pillar rows -----------------------------------------------------

PILLAR_ROWS_PAGE = 2
DOT_RADIUS = 4.645
DOT_CENTER_X = 90.815
DOT_ROWS: Tuple[Tuple[str, float], ...] = (
    ("visibility", 545.954),
    ("conversion", 480.546),
    ("reputation", 415.137),
    ("marketing", 349.729),
    ("tracking", 284.321),
)
_VECTOR_DOT_RE = re.compile(r"q\s*\n\s*1 0 0 1 95\.4604 545\.954 cm[\s\S]*?f\s*\n\s*Q")


def _blank_pillar_rows(stream: str) -> str:
    # Scores are redrawn as "15/20", so the static "/ 20" goes.
    stream = blank_show_text_where(stream, lambda text: text.strip() == "/ 20")
    stream = _VECTOR_DOT_RE.sub("", stream, count=1)
    return remove_xobject_draws(stream, ["X19", "X20", "X21", "X22"])


def _draw_pillar_dots(context: RegionContext) -> List[DrawCommand]:
    if not context.pillar_scores:
        logger.warning("Pillar scores missing; indicator dots not drawn", page=context.page_index)
        return []
    dots: List[DrawCommand] = []
    for pillar, y in DOT_ROWS:
        score = context.pillar_scores.get(pillar)
        if score is None:
            continue
        dots.append(
            FilledCircle(context.page_index, DOT_CENTER_X, y, DOT_RADIUS, BRAND_BLUE, score_opacity(score))
        )
    return dots


# -- page 4: biggest growth opportunity --------------------------------------

GROWTH_PAGE = 3
GROWTH_HEADING = "Your Biggest Growth Opportunity"
GROWTH_HEADING_SIZE = 30
PILLAR_NAME_MAX_SIZE = 50
PILLAR_NAME_MAX_WIDTH = PAGE_WIDTH - 54
IMPACT_SIZE = 22
IMPACT_LINE_HEIGHT = 1.3
IMPACT_MAX_WIDTH = 450
HEADING_GAP = 20
PILLAR_GAP = 10
GROWTH_AREA = (60.0, 740.0)


def _blank_growth_heading(stream: str) -> str:
    return blank_show_text_where(stream, lambda text: "Biggest Growth Opportunity" in text)


def _draw_growth_opportunity(context: RegionContext) -> List[DrawCommand]:
    pillar_name = context.replacements.get(LOWEST_PILLAR_NAME)
    impact = context.replacements.get(LOWEST_PILLAR_IMPACT)
    if pillar_name is None or impact is None:
        logger.warning("Lowest pillar values missing; growth page left blank", page=context.page_index)
        return []

    metrics = context.metrics
    page = context.page_index

    pillar_size = float(PILLAR_NAME_MAX_SIZE)
    pillar_width = metrics.width(pillar_name, ARCHIVO_EXTRA_BOLD, pillar_size)
    if pillar_width > PILLAR_NAME_MAX_WIDTH:
        pillar_size *= PILLAR_NAME_MAX_WIDTH / pillar_width

    impact_lines = metrics.wrap(impact, ROBOTO_REGULAR, IMPACT_SIZE, IMPACT_MAX_WIDTH)
    impact_spacing = IMPACT_SIZE * IMPACT_LINE_HEIGHT
    impact_height = (len(impact_lines) - 1) * impact_spacing

    total_height = GROWTH_HEADING_SIZE + HEADING_GAP + pillar_size + PILLAR_GAP + impact_height
    area_bottom, area_top = GROWTH_AREA
    heading_y = area_bottom + (area_top - area_bottom + total_height) / 2
    pillar_y = heading_y - GROWTH_HEADING_SIZE - HEADING_GAP
    impact_y = pillar_y - pillar_size - PILLAR_GAP

    commands: List[DrawCommand] = [
        TextRun(
            page,
            centered_x(metrics.width(GROWTH_HEADING, ARCHIVO_EXTRA_BOLD, GROWTH_HEADING_SIZE)),
            heading_y,
            GROWTH_HEADING,
            ARCHIVO_EXTRA_BOLD,
            GROWTH_HEADING_SIZE,
            WHITE,
        ),
        TextRun(
            page,
            centered_x(metrics.width(pillar_name, ARCHIVO_EXTRA_BOLD, pillar_size)),
            pillar_y,
            pillar_name,
            ARCHIVO_EXTRA_BOLD,
            pillar_size,
            HIGHLIGHT_YELLOW,
        ),
    ]
    commands.extend(
        layout_lines(
            impact_lines,
            page_index=page,
            x=0.0,
            y=impact_y,
            font=ROBOTO_REGULAR,
            size=IMPACT_SIZE,
            color=WHITE,
            line_spacing=impact_spacing,
            metrics=metrics,
            center=PAGE_WIDTH / 2,
        )
    )
    return commands


# -- page 5: segment description card ----------------------------------------

DESCRIPTION_PAGE = 4
CARD_LEFT = 84.7
CARD_RIGHT = 510.6
CARD_TOP = 597.4
CARD_TOP_PADDING = 25
CARD_BOTTOM_PADDING = 20
CARD_OPACITY = 0.12
ACCENT_X = 95.9
ACCENT_WIDTH = 1.548
ACCENT_INSET = 10
DESCRIPTION_TEXT_X = 115.0
_ACCENT_RECT_RE = re.compile(r"97\.437\s+556\.683\s+-1\.548\s+31\.587\s+re\s*\nf")


def _blank_description_card(stream: str) -> str:
    stream = remove_xobject_draws(stream, ["X36"])
    return _ACCENT_RECT_RE.sub("", stream)


def _draw_description_card(context: RegionContext) -> List[DrawCommand]:
    commands: List[DrawCommand] = []
    rule = context.rules.get(SEGMENT_DESCRIPTION)
    for position in context.positions:
        value = context.replacements.get(position.token)
        if value is None or rule is None:
            logger.warning("Description block not drawn", token=position.token, page=context.page_index)
            continue
        value += position.suffix
        size = position.font_size
        lines = context.metrics.wrap(value, rule.font, size, rule.max_width)
        spacing = size * rule.line_height
        text_height = (len(lines) - 1) * spacing + size

        text_start_y = CARD_TOP - CARD_TOP_PADDING
        card_bottom = text_start_y - text_height - CARD_BOTTOM_PADDING
        card_height = CARD_TOP - card_bottom

        commands.append(
            FilledRect(
                context.page_index,
                CARD_LEFT,
                card_bottom,
                CARD_RIGHT - CARD_LEFT,
                card_height,
                BRAND_BLUE,
                CARD_OPACITY,
            )
        )
        commands.append(
            FilledRect(
                context.page_index,
                ACCENT_X,
                card_bottom + ACCENT_INSET,
                ACCENT_WIDTH,
                card_height - 2 * ACCENT_INSET,
                ACCENT_BLUE,
            )
        )
        commands.extend(
            layout_lines(
                lines,
                page_index=context.page_index,
                x=DESCRIPTION_TEXT_X,
                y=text_start_y,
                font=rule.font,
                size=size,
                color=position.color,
                line_spacing=spacing,
                metrics=context.metrics,
            )
        )
    return commands


# -- page 7: call to action ---------------------------------------------------

CTA_PAGE = 6
CTA_SENTENCE_MARKER = "Businesses lik"
CTA_SENTENCE_SIZE = 16
CTA_SENTENCE_BASELINES = (565.681, 549.681)
CTA_BUTTON_RECT = (146.653, 426.676, 448.588, 480.87)


def _blank_cta_sentence(stream: str) -> str:
    return blank_text_block_containing(stream, CTA_SENTENCE_MARKER)


def _draw_call_to_action(context: RegionContext) -> List[DrawCommand]:
    commands: List[DrawCommand] = []
    business_name = context.replacements.get(BUSINESS_NAME)
    focus_area = context.replacements.get(PRIMARY_FOCUS_AREA)
    if business_name is None or focus_area is None:
        logger.warning("Call-to-action sentence values missing", page=context.page_index)
    else:
        first_line = (
            ("Businesses like ", ROBOTO_REGULAR),
            (business_name, ROBOTO_BOLD),
            (" typically grow fastest by", ROBOTO_REGULAR),
        )
        second_line = (
            ("fixing ", ROBOTO_REGULAR),
            (focus_area, ROBOTO_BOLD),
            (" first.", ROBOTO_REGULAR),
        )
        for segments, baseline in zip((first_line, second_line), CTA_SENTENCE_BASELINES):
            commands.extend(
                composite_line(
                    segments,
                    page_index=context.page_index,
                    y=baseline,
                    size=CTA_SENTENCE_SIZE,
                    color=DARK_TEXT,
                    metrics=context.metrics,
                )
            )
    if context.link_url:
        commands.append(LinkArea(context.page_index, CTA_BUTTON_RECT, context.link_url))
    return commands


TEMPLATE_REGIONS: Tuple[TemplateRegion, ...] = (
    TemplateRegion("internal-notes", every_page, blank_internal_notes),
    TemplateRegion(
        "score-ring",
        on_page(SCORE_RING_PAGE),
        _blank_score_ring,
        claims=frozenset({TOTAL_SCORE}),
        draw=_draw_score_ring,
    ),
    TemplateRegion("pillar-rows", on_page(PILLAR_ROWS_PAGE), _blank_pillar_rows, draw=_draw_pillar_dots),
    TemplateRegion(
        "growth-opportunity",
        on_page(GROWTH_PAGE),
        _blank_growth_heading,
        claims=frozenset({LOWEST_PILLAR_NAME, LOWEST_PILLAR_IMPACT}),
        draw=_draw_growth_opportunity,
    ),
    TemplateRegion(
        "description-card",
        on_page(DESCRIPTION_PAGE),
        _blank_description_card,
        claims=frozenset({SEGMENT_DESCRIPTION}),
        draw=_draw_description_card,
    ),
    TemplateRegion(
        "call-to-action",
        on_page(CTA_PAGE),
        _blank_cta_sentence,
        claims=frozenset({BUSINESS_NAME, PRIMARY_FOCUS_AREA}),
        draw=_draw_call_to_action,
    ),
)
