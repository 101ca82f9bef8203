from __future__ import annotations

import datetime as dt

import pytest

from scorecard.services.report.placeholder_blanker import PLACEHOLDER_TOKENS
from scorecard.services.scoring import (
    PILLARS,
    TIERS,
    ScorecardData,
    build_replacements,
    format_report_date,
    lowest_pillar,
    tier_for_score,
)
from scorecard.utils.exceptions import InvalidScorecardData
from template_builder import SAMPLE_PAYLOAD


@pytest.mark.parametrize(
    ("score", "tier"),
    [
        (0, "at_risk"),
        (30, "at_risk"),
        (31, "needs_improvement"),
        (55, "needs_improvement"),
        (56, "growth_ready"),
        (75, "growth_ready"),
        (76, "market_leader"),
        (100, "market_leader"),
    ],
)
def test_tier_boundaries(score, tier):
    assert tier_for_score(score).key == tier


def test_tiers_cover_the_whole_scale_without_gaps():
    ordered = sorted(TIERS.values(), key=lambda tier: tier.score_min)
    assert ordered[0].score_min == 0
    assert ordered[-1].score_max == 100
    for lower, upper in zip(ordered, ordered[1:]):
        assert upper.score_min == lower.score_max + 1


def test_lowest_pillar_prefers_earliest_on_ties():
    scores = {"visibility": 15, "conversion": 10, "reputation": 17, "marketing": 12, "tracking": 10}
    assert lowest_pillar(scores) == "conversion"


def test_report_date_format():
    assert format_report_date(dt.date(2026, 10, 19)) == "Oct 19, 2026"
    assert format_report_date(dt.date(2025, 1, 5)) == "Jan 5, 2025"


def test_build_replacements_fills_every_token():
    data = ScorecardData.from_payload(SAMPLE_PAYLOAD)
    replacements = build_replacements(data, dt.date(2026, 10, 19))

    assert set(replacements) == set(PLACEHOLDER_TOKENS)
    assert replacements["{{Business_Name}}"] == "Acme Plumbing"
    assert replacements["{{Report_Date}}"] == "Oct 19, 2026"
    assert replacements["{{Total_Score}}"] == "62"
    assert replacements["{{Segment_Name}}"] == "Growth Ready"
    assert replacements["{{Segment_One_Liner}}"] == TIERS["growth_ready"].summary
    assert replacements["{{Visibility_Score}}"] == "15/20"
    assert replacements["{{Tracking_Score}}"] == "10/20"
    assert replacements["{{Lowest_Pillar_Name}}"] == "Conversion & Contact"
    assert replacements["{{Lowest_Pillar_Impact_Statement}}"] == PILLARS["conversion"].impact_statement
    assert replacements["{{Primary_Focus_Area}}"] == "Conversion & Contact"
    assert replacements["{{Segment_Description_Block}}"] == TIERS["growth_ready"].description_block


def test_explicit_tier_overrides_score_mapping():
    data = ScorecardData.from_payload({**SAMPLE_PAYLOAD, "tier": "market_leader"})
    assert build_replacements(data)["{{Segment_Name}}"] == "Market Leader"


def test_payload_values_are_trimmed():
    data = ScorecardData.from_payload({**SAMPLE_PAYLOAD, "business_name": "  Acme  "})
    assert data.business_name == "Acme"


@pytest.mark.parametrize(
    ("changes", "message"),
    [
        ({"business_name": ""}, "business_name is required"),
        ({"city": None}, "city is required"),
        ({"total_score": 101}, "total_score must be between 0 and 100"),
        ({"total_score": "62"}, "total_score must be an integer"),
        ({"total_score": True}, "total_score must be an integer"),
        ({"pillar_scores": [1, 2]}, "pillar_scores must be an object"),
        ({"pillar_scores": {"visibility": 1}}, "pillar_scores missing"),
        (
            {"pillar_scores": {**SAMPLE_PAYLOAD["pillar_scores"], "marketing": 21}},
            "pillar_scores.marketing must be between 0 and 20",
        ),
        ({"tier": "legend"}, "Invalid tier: legend"),
    ],
)
def test_invalid_payloads(changes, message):
    with pytest.raises(InvalidScorecardData) as excinfo:
        ScorecardData.from_payload({**SAMPLE_PAYLOAD, **changes})
    assert message in str(excinfo.value)
