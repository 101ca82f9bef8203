from .catalog import PILLAR_ORDER, PILLARS, TIER_ORDER, TIERS, Pillar, Tier
from .scorecard import (
    ScorecardData,
    build_replacements,
    format_report_date,
    lowest_pillar,
    tier_for_score,
)

__all__ = [
    "PILLAR_ORDER",
    "PILLARS",
    "TIER_ORDER",
    "TIERS",
    "Pillar",
    "Tier",
    "ScorecardData",
    "build_replacements",
    "format_report_date",
    "lowest_pillar",
    "tier_for_score",
]
