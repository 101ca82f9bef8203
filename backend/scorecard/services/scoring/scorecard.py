from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ...utils.exceptions import InvalidScorecardData
from .catalog import PILLAR_MAX_SCORE, PILLAR_ORDER, PILLARS, TIER_ORDER, TIERS, TOTAL_MAX_SCORE, Tier

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass(frozen=True)
class ScorecardData:
    business_name: str
    city: str
    total_score: int
    pillar_scores: Mapping[str, int]
    tier: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ScorecardData":
        """Validate a request body; raises :class:`InvalidScorecardData` on the first problem."""
        business_name = _required_text(payload, "business_name")
        city = _required_text(payload, "city")
        total_score = _score(payload.get("total_score"), "total_score", TOTAL_MAX_SCORE)

        raw_pillars = payload.get("pillar_scores")
        if not isinstance(raw_pillars, Mapping):
            raise InvalidScorecardData("pillar_scores must be an object")
        missing = [key for key in PILLAR_ORDER if key not in raw_pillars]
        if missing:
            raise InvalidScorecardData(f"pillar_scores missing: {', '.join(missing)}")
        pillar_scores = {
            key: _score(raw_pillars[key], f"pillar_scores.{key}", PILLAR_MAX_SCORE) for key in PILLAR_ORDER
        }

        tier = payload.get("tier")
        if tier is not None and tier not in TIERS:
            raise InvalidScorecardData(f"Invalid tier: {tier}. Valid tiers: {', '.join(TIER_ORDER)}")

        return cls(
            business_name=business_name,
            city=city,
            total_score=total_score,
            pillar_scores=pillar_scores,
            tier=tier,
        )

    def resolved_tier(self) -> Tier:
        if self.tier:
            return TIERS[self.tier]
        return tier_for_score(self.total_score)


def _required_text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidScorecardData(f"{key} is required")
    return value.strip()


def _score(value: Any, key: str, maximum: int) -> int:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidScorecardData(f"{key} must be an integer")
    if not 0 <= value <= maximum:
        raise InvalidScorecardData(f"{key} must be between 0 and {maximum}")
    return value


def tier_for_score(score: int) -> Tier:
    for key in TIER_ORDER:
        if score <= TIERS[key].score_max:
            return TIERS[key]
    return TIERS[TIER_ORDER[-1]]


def lowest_pillar(scores: Mapping[str, int]) -> str:
    """Key of the weakest pillar; ties go to the earliest pillar."""
    return min(PILLAR_ORDER, key=lambda key: scores[key])


def format_report_date(date: dt.date) -> str:
    return f"{_MONTHS[date.month - 1]} {date.day}, {date.year}"


def build_replacements(data: ScorecardData, report_date: Optional[dt.date] = None) -> Dict[str, str]:
    tier = data.resolved_tier()
    weakest = PILLARS[lowest_pillar(data.pillar_scores)]
    scores = data.pillar_scores
    return {
        "{{Business_Name}}": data.business_name,
        "{{City_or_Service_Area}}": data.city,
        "{{Report_Date}}": format_report_date(report_date or dt.date.today()),
        "{{Total_Score}}": str(data.total_score),
        "{{Segment_Name}}": tier.name,
        "{{Segment_One_Liner}}": tier.summary,
        "{{Visibility_Score}}": f"{scores['visibility']}/{PILLAR_MAX_SCORE}",
        "{{Conversion_Score}}": f"{scores['conversion']}/{PILLAR_MAX_SCORE}",
        "{{Reputation_Score}}": f"{scores['reputation']}/{PILLAR_MAX_SCORE}",
        "{{Marketing_Score}}": f"{scores['marketing']}/{PILLAR_MAX_SCORE}",
        "{{Tracking_Score}}": f"{scores['tracking']}/{PILLAR_MAX_SCORE}",
        "{{Lowest_Pillar_Name}}": weakest.name,
        "{{Lowest_Pillar_Impact_Statement}}": weakest.impact_statement,
        "{{Segment_Description_Block}}": tier.description_block,
        "{{Primary_Focus_Area}}": weakest.name,
    }
