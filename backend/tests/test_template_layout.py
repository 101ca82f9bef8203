from __future__ import annotations

import pytest

from scorecard.services.report.draw_commands import FilledCircle, FilledRect, LinkArea, TextRun
from scorecard.services.report.font_metrics import DEFAULT_METRICS, PAGE_WIDTH, text_width
from scorecard.services.report.layout_engine import LayoutEngine
from scorecard.services.report.placeholder_blanker import BLANK_SHOW_TEXT, RecordedPosition
from scorecard.services.report.template_layout import (
    BRAND_BLUE,
    DARK_TEXT,
    DRAWING_FONTS,
    RENDERING_RULES,
    TEMPLATE_REGIONS,
    score_opacity,
)

from template_builder import CTA_PAGE, DESCRIPTION_PAGE, PILLAR_PAGE, SCORE_PAGE

PILLARS = {"visibility": 16, "conversion": 15, "reputation": 11, "marketing": 10, "tracking": 20}


def _region(name):
    return next(region for region in TEMPLATE_REGIONS if region.name == name)


def _plan(positions, replacements, pillar_scores=None, link_url="https://example.test/audit"):
    engine = LayoutEngine(rules=RENDERING_RULES, regions=TEMPLATE_REGIONS, link_url=link_url)
    return engine.plan(positions, replacements, page_count=7, pillar_scores=pillar_scores)


@pytest.mark.parametrize(
    ("score", "opacity"),
    [(20, 1.0), (16, 1.0), (15, 0.75), (11, 0.75), (10, 0.5), (0, 0.5)],
)
def test_score_opacity_tiers(score, opacity):
    assert score_opacity(score) == opacity


def test_internal_notes_region_is_first_and_applies_everywhere():
    first = TEMPLATE_REGIONS[0]
    assert first.name == "internal-notes"
    assert all(first.applies_to(index) for index in range(10))


def test_score_ring_blanking():
    result = _region("score-ring").blank(SCORE_PAGE)
    assert "/X10 Do" not in result
    assert "out of 100" not in result
    assert "({{Total_Score}}) Tj" in result


def test_score_ring_is_centred_in_the_ring():
    plan = _plan([], {"{{Total_Score}}": "62"})
    runs = [command for command in plan.for_page(1) if isinstance(command, TextRun)]
    score, label = runs

    score_cap = 52 * 0.71
    label_cap = 20 * 0.71
    expected_score_y = 475.138 + (score_cap + 5 + label_cap) / 2 - score_cap
    assert score.text == "62"
    assert score.size == 52
    assert score.y == pytest.approx(expected_score_y)
    assert score.x == pytest.approx(297.637 - text_width("62", "Roboto-Bold", 52) / 2)
    assert score.color == DARK_TEXT
    assert label.text == "out of 100"
    assert label.y == pytest.approx(expected_score_y - 5 - label_cap)
    assert label.color == BRAND_BLUE


def test_pillar_rows_blanking():
    result = _region("pillar-rows").blank(PILLAR_PAGE)
    assert "95.4604 545.954 cm" not in result
    for name in ("X19", "X20", "X21", "X22"):
        assert f"/{name} Do" not in result
    assert "(/ 20) Tj" not in result
    assert "({{Visibility_Score}}) Tj" in result


def test_pillar_dots_follow_scores():
    plan = _plan([], {}, pillar_scores=PILLARS)
    dots = [command for command in plan.for_page(2) if isinstance(command, FilledCircle)]
    assert [dot.center_y for dot in dots] == [545.954, 480.546, 415.137, 349.729, 284.321]
    assert [dot.opacity for dot in dots] == [1.0, 0.75, 0.75, 0.5, 1.0]
    assert {dot.center_x for dot in dots} == {90.815}
    assert {dot.radius for dot in dots} == {4.645}


def test_growth_opportunity_layout():
    replacements = {
        "{{Lowest_Pillar_Name}}": "Conversion & Contact",
        "{{Lowest_Pillar_Impact_Statement}}": (
            "Your website may be getting traffic, but if visitors can't quickly understand what you "
            "offer or how to reach you, they leave."
        ),
    }
    positions = [
        RecordedPosition("{{Lowest_Pillar_Name}}", 3, 150, 500, 50, "Archivo-ExtraBold", DARK_TEXT),
    ]
    plan = _plan(positions, replacements)
    runs = [command for command in plan.for_page(3) if isinstance(command, TextRun)]

    heading, pillar = runs[0], runs[1]
    impact_lines = runs[2:]
    assert heading.text == "Your Biggest Growth Opportunity"
    assert pillar.text == "Conversion & Contact"
    assert pillar.size <= 50
    assert text_width(pillar.text, "Archivo-ExtraBold", pillar.size) <= PAGE_WIDTH - 54 + 1e-6
    assert pillar.y == pytest.approx(heading.y - 30 - 20)
    assert impact_lines[0].y == pytest.approx(pillar.y - pillar.size - 10)

    impact_height = (len(impact_lines) - 1) * 22 * 1.3
    total_height = 30 + 20 + pillar.size + 10 + impact_height
    assert heading.y == pytest.approx(60 + (740 - 60 + total_height) / 2)
    # The claimed token is not drawn a second time at its recorded spot.
    assert not any(run.x == 150 and run.y == 500 for run in runs)


def test_long_pillar_name_is_scaled_to_fit():
    name = "An Extremely Long Pillar Name That Cannot Fit"
    plan = _plan([], {"{{Lowest_Pillar_Name}}": name, "{{Lowest_Pillar_Impact_Statement}}": "Short."})
    pillar = [command for command in plan.for_page(3) if isinstance(command, TextRun)][1]
    assert pillar.size < 50
    assert text_width(name, "Archivo-ExtraBold", pillar.size) == pytest.approx(PAGE_WIDTH - 54)


def test_description_card_blanking():
    result = _region("description-card").blank(DESCRIPTION_PAGE)
    assert "/X36 Do" not in result
    assert "97.437 556.683 -1.548 31.587 re" not in result
    assert "({{Segment_Description_Block}}) Tj" in result


def test_description_card_grows_with_text_and_draws_behind_it():
    description = " ".join(["Your local marketing foundation is solid."] * 6)
    position = RecordedPosition("{{Segment_Description_Block}}", 4, 115, 572.4, 12, "Roboto-Regular", DARK_TEXT)
    plan = _plan([position], {"{{Segment_Description_Block}}": description})
    commands = plan.for_page(4)

    card, accent = commands[0], commands[1]
    texts = [command for command in commands if isinstance(command, TextRun)]
    assert isinstance(card, FilledRect) and isinstance(accent, FilledRect)
    assert card.opacity == 0.12
    assert card.y + card.height == pytest.approx(597.4)
    assert accent.y == pytest.approx(card.y + 10)
    assert accent.height == pytest.approx(card.height - 20)

    lines = DEFAULT_METRICS.wrap(description, "Roboto-Regular", 12, 380)
    text_height = (len(lines) - 1) * 12 * 1.35 + 12
    assert card.y == pytest.approx(597.4 - 25 - text_height - 20)
    assert [run.text for run in texts] == lines
    assert {run.x for run in texts} == {115.0}
    assert texts[0].y == pytest.approx(597.4 - 25)


def test_call_to_action_sentence_and_link():
    replacements = {"{{Business_Name}}": "Acme Plumbing", "{{Primary_Focus_Area}}": "Local Visibility"}
    positions = [RecordedPosition("{{Business_Name}}", 6, 150, 565.681, 16, "Roboto-Regular", DARK_TEXT)]
    plan = _plan(positions, replacements)
    commands = plan.for_page(6)

    runs = [command for command in commands if isinstance(command, TextRun)]
    assert [run.text for run in runs] == [
        "Businesses like ",
        "Acme Plumbing",
        " typically grow fastest by",
        "fixing ",
        "Local Visibility",
        " first.",
    ]
    assert [run.font for run in runs if run.text in ("Acme Plumbing", "Local Visibility")] == [
        "Roboto-Bold",
        "Roboto-Bold",
    ]
    assert {run.y for run in runs[:3]} == {565.681}
    assert {run.y for run in runs[3:]} == {549.681}
    assert commands[-1] == LinkArea(6, (146.653, 426.676, 448.588, 480.87), "https://example.test/audit")


def test_call_to_action_blanks_the_authored_sentence():
    result = _region("call-to-action").blank(CTA_PAGE)
    assert "Businesses lik" not in result
    assert "{{Primary_Focus_Area}}" not in result
    assert "(Book your audit) Tj" in result
    assert result.count(BLANK_SHOW_TEXT) == 2


def test_every_rule_draws_with_a_required_font():
    assert {rule.font for rule in RENDERING_RULES.values()} <= set(DRAWING_FONTS)
    assert "Archivo-Bold" not in DRAWING_FONTS
