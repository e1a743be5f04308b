"""
Tests for plan tier classification.
"""
import pytest

from tradedir.core.tiers import PlanTier, classify_plan


class TestPlanTier:
    """The tier ladder itself."""

    def test_ordered_highest_priority_first(self):
        keys = [tier.key for tier in PlanTier.ordered()]
        assert keys == ["diamond", "gold", "silver", "booster", "certified", "startup", "trial"]

    def test_priorities_and_labels(self):
        assert PlanTier.DIAMOND.priority == 700
        assert PlanTier.TRIAL.priority == 100
        assert PlanTier.BOOSTER.label == "BOOSTER"

    def test_from_key_unknown_falls_back_to_trial(self):
        assert PlanTier.from_key("silver") is PlanTier.SILVER
        assert PlanTier.from_key("platinum") is PlanTier.TRIAL
        assert PlanTier.from_key(None) is PlanTier.TRIAL


class TestClassifyPlan:
    """Keyword classification of free-text plan names."""

    @pytest.mark.parametrize("plan_name,expected", [
        ("Diamond", PlanTier.DIAMOND),
        ("  GOLD Plus ", PlanTier.GOLD),
        ("silver monthly", PlanTier.SILVER),
        ("Visibility Booster", PlanTier.BOOSTER),
        ("Boost 90 days", PlanTier.BOOSTER),
        ("Certified Seller", PlanTier.CERTIFIED),
        ("Trust Certificate", PlanTier.CERTIFIED),
        ("Startup Pack", PlanTier.STARTUP),
        ("14 day trial", PlanTier.TRIAL),
        ("Free", PlanTier.TRIAL),
    ])
    def test_keyword_match(self, plan_name, expected):
        assert classify_plan(plan_name) is expected

    def test_first_rule_wins(self):
        assert classify_plan("Gold Certified") is PlanTier.GOLD
        assert classify_plan("Certified Startup") is PlanTier.CERTIFIED
        assert classify_plan("Free Diamond Upgrade") is PlanTier.DIAMOND

    @pytest.mark.parametrize("plan_name", [None, "", "   ", "Enterprise", "Platinum"])
    def test_empty_or_unknown_is_trial(self, plan_name):
        assert classify_plan(plan_name) is PlanTier.TRIAL
