"""Hub dashboard statistics from campaign and route snapshots"""

from decimal import Decimal
from typing import Iterable, Set

from microservices.campaign_service.models import CampaignBase, CampaignStatus, ContainerCampaign

from .models import HubStats, Route

VOLUME_STATUSES = frozenset({CampaignStatus.FUNDED, CampaignStatus.COMPLETED})


def summarize_hub(campaigns: Iterable[CampaignBase], routes: Iterable[Route]) -> HubStats:
    campaigns = list(campaigns)
    routes = list(routes)

    volume = sum(
        (c.current_amount for c in campaigns if c.status in VOLUME_STATUSES),
        Decimal(0),
    )

    # route departure ports, every stop, and container origins and destinations, by name
    ports: Set[str] = set()
    for campaign in campaigns:
        if isinstance(campaign, ContainerCampaign):
            ports.update(p for p in (campaign.origin_port, campaign.destination_port) if p)
    for route in routes:
        if route.departure_port:
            ports.add(route.departure_port)
        ports.update(p.name for p in route.ports if p.name)

    return HubStats(
        active_campaigns=sum(1 for c in campaigns if c.status == CampaignStatus.ACTIVE),
        total_volume=volume,
        active_routes=len(routes),
        port_count=len(ports),
    )


__all__ = ["VOLUME_STATUSES", "summarize_hub"]
