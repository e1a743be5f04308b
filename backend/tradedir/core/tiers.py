"""
Subscription plan tiers for directory ranking.

Vendors are ranked by the tier of their active plan. Tiers are a closed
set; iteration order is priority order (highest first).
"""

from enum import Enum
from typing import List, Optional, Tuple


class PlanTier(Enum):
    """Plan tier with a stable key, display label and ranking priority."""

    DIAMOND = ("diamond", "DIAMOND", 700)
    GOLD = ("gold", "GOLD", 600)
    SILVER = ("silver", "SILVER", 500)
    BOOSTER = ("booster", "BOOSTER", 400)
    CERTIFIED = ("certified", "CERTIFIED", 300)
    STARTUP = ("startup", "STARTUP", 200)
    TRIAL = ("trial", "TRIAL", 100)

    def __init__(self, key: str, label: str, priority: int):
        self.key = key
        self.label = label
        self.priority = priority

    @classmethod
    def ordered(cls) -> List["PlanTier"]:
        """All tiers, highest priority first."""
        return sorted(cls, key=lambda tier: tier.priority, reverse=True)

    @classmethod
    def from_key(cls, key: Optional[str]) -> "PlanTier":
        """Look up a tier by key. Unknown keys resolve to TRIAL."""
        for tier in cls:
            if tier.key == key:
                return tier
        return cls.TRIAL


# Keyword rules, first match wins. "Gold Certified" is GOLD because
# gold is listed before certified.
PLAN_KEYWORD_RULES: Tuple[Tuple[Tuple[str, ...], PlanTier], ...] = (
    (("diamond",), PlanTier.DIAMOND),
    (("gold",), PlanTier.GOLD),
    (("silver",), PlanTier.SILVER),
    (("booster", "boost"), PlanTier.BOOSTER),
    (("certified", "certificate"), PlanTier.CERTIFIED),
    (("startup",), PlanTier.STARTUP),
    (("trial", "free"), PlanTier.TRIAL),
)


def normalize_plan_name(plan_name: Optional[str]) -> str:
    """Trim and lowercase a plan name; None becomes an empty string."""
    return str(plan_name or "").strip().lower()


def classify_plan(plan_name: Optional[str]) -> PlanTier:
    """
    Map a free-text plan name to its tier.

    Never raises: empty or unrecognised names are TRIAL.
    """
    name = normalize_plan_name(plan_name)
    if not name:
        return PlanTier.TRIAL

    for keywords, tier in PLAN_KEYWORD_RULES:
        if any(keyword in name for keyword in keywords):
            return tier

    return PlanTier.TRIAL
