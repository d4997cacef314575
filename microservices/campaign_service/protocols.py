"""
Campaign Service Protocols

Defines interfaces for dependency injection and testing.
Following the protocol-based architecture pattern.
"""

from typing import List, Optional, Protocol, runtime_checkable

from core.ledger_protocols import (
    BalanceProviderProtocol,
    LedgerClientProtocol,
    SignerProtocol,
)
from core.ledger_types import LedgerCoordinatorError

from .models import Campaign


# ====================
# Catalog Protocol
# ====================


@runtime_checkable
class CampaignCatalogProtocol(Protocol):
    """Read side of the campaign coordinator, consumed by route_service"""

    async def list_campaigns(self) -> List[Campaign]:
        """All decodable campaigns, ids 1..counter-1"""
        ...

    async def get_campaign(self, campaign_id: str) -> Optional[Campaign]:
        """Single campaign, or None"""
        ...


# ====================
# Custom Exceptions
# ====================


class CampaignNotFoundError(LedgerCoordinatorError):
    """Raised when a campaign id does not resolve to a decodable record"""
    pass


__all__ = [
    "LedgerClientProtocol",
    "SignerProtocol",
    "BalanceProviderProtocol",
    "CampaignCatalogProtocol",
    "CampaignNotFoundError",
]
