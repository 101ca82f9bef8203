"""Copy for the four score tiers and the five marketing pillars."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple


@dataclass(frozen=True)
class Tier:
    key: str
    name: str
    score_min: int
    score_max: int
    summary: str
    description_block: str


@dataclass(frozen=True)
class Pillar:
    key: str
    name: str
    impact_statement: str


TIER_ORDER: Tuple[str, ...] = ("at_risk", "needs_improvement", "growth_ready", "market_leader")
PILLAR_ORDER: Tuple[str, ...] = ("visibility", "conversion", "reputation", "marketing", "tracking")

PILLAR_MAX_SCORE = 20
TOTAL_MAX_SCORE = 100

TIERS: Mapping[str, Tier] = MappingProxyType({
    "at_risk": Tier(
        key="at_risk",
        name="At Risk",
        score_min=0,
        score_max=30,
        summary=(
            "Your online presence is costing you leads. Local customers are likely choosing "
            "competitors before they ever contact you."
        ),
        description_block=(
            "Your local marketing is significantly under-performing. Key areas like search visibility, "
            "website conversion, and online reputation are well below the threshold needed to compete "
            "effectively in your market. Most potential customers are finding your competitors first, "
            "and those who do land on your website may be leaving due to friction or lack of trust "
            "signals. The good news: targeted improvements to your weakest areas can produce rapid, "
            "measurable gains. Focus on fixing the fundamentals before expanding into new channels."
        ),
    ),
    "needs_improvement": Tier(
        key="needs_improvement",
        name="Needs Improvement",
        score_min=31,
        score_max=55,
        summary="You have a foundation, but missed opportunities are limiting consistent growth.",
        description_block=(
            "You have some of the building blocks in place, but gaps in your marketing are preventing "
            "consistent lead flow. Your business may appear in local searches sometimes but not "
            "reliably. Your website communicates your services but may lack the clarity or trust "
            "elements that convert browsers into buyers. Inconsistent marketing activity means your "
            "pipeline fluctuates. By tightening up your weakest pillar, you can move from sporadic "
            "results to a more predictable growth trajectory."
        ),
    ),
    "growth_ready": Tier(
        key="growth_ready",
        name="Growth Ready",
        score_min=56,
        score_max=75,
        summary=(
            "Your marketing is working — but it's not optimized. Small improvements could unlock "
            "significantly more leads."
        ),
        description_block=(
            "Your local marketing foundation is solid. You're showing up in search, your website works "
            "reasonably well, and you have some trust signals in place. However, there are specific "
            "areas where optimization could unlock significantly more leads without requiring a major "
            "overhaul. You're likely leaving money on the table in one or two key areas. Addressing "
            "your lowest-scoring pillar will have an outsized impact on your overall performance and "
            "help you pull ahead of local competitors."
        ),
    ),
    "market_leader": Tier(
        key="market_leader",
        name="Market Leader",
        score_min=76,
        score_max=100,
        summary=(
            "You're ahead of most local competitors. The next step is scaling and protecting your "
            "position."
        ),
        description_block=(
            "You're operating at a high level across most local marketing pillars. Your visibility is "
            "strong, your conversion paths are working, and you've built meaningful trust with your "
            "audience. At this stage, the opportunity isn't about fixing what's broken — it's about "
            "scaling what works and defending your market position. Even small refinements to your "
            "remaining weak spots can compound into significant competitive advantages. Consider "
            "advanced strategies like marketing automation, referral systems, and multi-channel "
            "campaigns to stay ahead."
        ),
    ),
})

PILLARS: Mapping[str, Pillar] = MappingProxyType({
    "visibility": Pillar(
        key="visibility",
        name="Local Visibility",
        impact_statement=(
            "Customers can't choose you if they can't find you. Low visibility in local search and "
            "maps means you're losing leads to competitors who show up first. Improving your local "
            "search presence is the fastest way to drive new inquiries."
        ),
    ),
    "conversion": Pillar(
        key="conversion",
        name="Conversion & Contact",
        impact_statement=(
            "Your website may be getting traffic, but if visitors can't quickly understand what you "
            "offer or how to reach you, they leave. Reducing friction in your contact and booking "
            "process can dramatically increase the number of leads you capture."
        ),
    ),
    "reputation": Pillar(
        key="reputation",
        name="Reputation & Trust",
        impact_statement=(
            "Modern customers check reviews and credibility signals before making a decision. Without "
            "strong social proof, potential leads hesitate or choose a competitor with "
            "better-established trust. Building your reputation creates a compounding advantage."
        ),
    ),
    "marketing": Pillar(
        key="marketing",
        name="Marketing Consistency",
        impact_statement=(
            "Sporadic marketing produces sporadic results. When your messaging and outreach are "
            "inconsistent, you lose momentum and brand recognition. A steady, intentional marketing "
            "cadence keeps your pipeline full and your brand top-of-mind."
        ),
    ),
    "tracking": Pillar(
        key="tracking",
        name="Tracking & Performance",
        impact_statement=(
            "If you can't measure it, you can't improve it. Without proper tracking, you're spending "
            "time and money on marketing with no way to know what's working. Setting up lead tracking "
            "gives you the data to make smarter decisions and maximize ROI."
        ),
    ),
})
