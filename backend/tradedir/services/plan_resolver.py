"""
Active plan resolution for directory ranking.

Reads currently active vendor plan subscriptions and assigns each vendor
exactly one tier. The most recently started active subscription wins.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Protocol

from ..core.params import is_valid_id
from ..core.tiers import PlanTier, classify_plan

logger = logging.getLogger(__name__)

SUBSCRIPTIONS_TABLE = "vendor_plan_subscriptions"
ACTIVE_STATUS = "ACTIVE"


class SubscriptionSource(Protocol):
    """Anything that can list active subscriptions, newest start first."""

    def fetch_active(self, now: datetime) -> List[Dict[str, Any]]:
        ...


class SupabaseSubscriptionSource:
    """Subscription source backed by the vendor_plan_subscriptions table."""

    def __init__(self, supabase):
        self.supabase = supabase

    def fetch_active(self, now: datetime) -> List[Dict[str, Any]]:
        now_iso = now.isoformat()

        result = self.supabase.table(SUBSCRIPTIONS_TABLE)\
            .select("vendor_id, plan_id, status, end_date, start_date, plan:vendor_plans(name)")\
            .eq("status", ACTIVE_STATUS)\
            .or_(f"end_date.is.null,end_date.gt.{now_iso}")\
            .order("start_date", desc=True)\
            .execute()

        return result.data or []


@dataclass
class VendorPlanMap:
    """Per-request vendor -> plan assignment. Vendors without an entry are unranked."""
    plan_name_by_vendor: Dict[str, str] = field(default_factory=dict)
    tier_by_vendor: Dict[str, PlanTier] = field(default_factory=dict)

    @property
    def vendor_ids(self) -> List[str]:
        return list(self.tier_by_vendor.keys())

    def buckets(self) -> List[tuple]:
        """
        Vendor ids grouped by tier, highest priority first.

        Tiers with no vendors are omitted.
        """
        grouped: Dict[PlanTier, List[str]] = {tier: [] for tier in PlanTier.ordered()}
        for vendor_id, tier in self.tier_by_vendor.items():
            grouped[tier].append(vendor_id)
        return [(tier, ids) for tier, ids in grouped.items() if ids]

    def tier_for(self, vendor_id: Any) -> PlanTier:
        return self.tier_by_vendor.get(vendor_id, PlanTier.TRIAL)

    def plan_name_for(self, vendor_id: Any) -> str:
        return self.plan_name_by_vendor.get(vendor_id) or PlanTier.TRIAL.label


class ActivePlanResolver:
    """Builds a VendorPlanMap from a subscription source."""

    def __init__(self, source: SubscriptionSource):
        self.source = source

    def resolve(self, now: datetime) -> VendorPlanMap:
        """
        Assign a tier to every vendor with an active subscription.

        Rows arrive newest start first, so the first row seen for a vendor
        wins. Source errors propagate to the caller.
        """
        plan_map = VendorPlanMap()

        for row in self.source.fetch_active(now):
            vendor_id = (row or {}).get("vendor_id")
            if not is_valid_id(vendor_id):
                continue
            if vendor_id in plan_map.tier_by_vendor:
                continue

            plan = row.get("plan") or {}
            plan_name = plan.get("name") or ""
            plan_map.plan_name_by_vendor[vendor_id] = plan_name
            plan_map.tier_by_vendor[vendor_id] = classify_plan(plan_name)

        logger.debug(f"Resolved active plans for {len(plan_map.tier_by_vendor)} vendors")
        return plan_map
