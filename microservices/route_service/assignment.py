"""
Campaign-to-Route Assignment Pool

The ledger stores assignments per route only, so "at most one route per
campaign" is enforced by recomputing the pool from two snapshots: the routes
and the campaigns. Both functions are pure and issue no calls.
"""

from typing import Iterable, List, Set

from core.ledger_codec import filter_sentinel_ids

from microservices.campaign_service.models import CampaignBase, CampaignStatus

from .models import Route

ASSIGNABLE_STATUSES = frozenset({CampaignStatus.FUNDED, CampaignStatus.COMPLETED})


def assigned_campaign_ids(routes: Iterable[Route]) -> Set[str]:
    """Union of every route's assigned campaign ids, sentinels removed"""
    assigned: Set[str] = set()
    for route in routes:
        assigned.update(filter_sentinel_ids(route.assigned_campaign_ids))
    return assigned


def assignable_campaigns(
    routes: Iterable[Route],
    campaigns: Iterable[CampaignBase],
) -> List[CampaignBase]:
    """
    Funded or Completed campaigns not yet on any route.

    Keeps the campaigns' listing order. O(routes x slots + campaigns).
    """
    taken = assigned_campaign_ids(routes)
    return [
        c for c in campaigns
        if c.status in ASSIGNABLE_STATUSES and c.id not in taken
    ]


__all__ = [
    "ASSIGNABLE_STATUSES",
    "assigned_campaign_ids",
    "assignable_campaigns",
]
