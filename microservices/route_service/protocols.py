"""
Route Service Protocols

Defines interfaces for dependency injection and testing.
"""

from core.ledger_protocols import LedgerClientProtocol, SignerProtocol
from core.ledger_types import LedgerCoordinatorError

from microservices.campaign_service.protocols import CampaignCatalogProtocol


class RouteNotFoundError(LedgerCoordinatorError):
    """Raised when a route id does not resolve to a decodable record"""
    pass


__all__ = [
    "LedgerClientProtocol",
    "SignerProtocol",
    "CampaignCatalogProtocol",
    "RouteNotFoundError",
]
