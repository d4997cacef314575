"""
Route Service Factory

Builds the route coordinator together with the campaign coordinator it reads
campaign listings from; both share one ledger client.
"""

import logging
from typing import Optional

from core.config import LedgerConfig, get_settings
from core.ledger_client import GatewayLedgerClient
from core.ledger_codec import require_address

from microservices.campaign_service.campaign_service import CampaignService
from microservices.campaign_service.factory import build_fee_policy

from .protocols import LedgerClientProtocol
from .route_service import RouteService

logger = logging.getLogger(__name__)


class RouteServiceFactory:
    """Factory for creating route service components"""

    def __init__(
        self,
        config: Optional[LedgerConfig] = None,
        ledger: Optional[LedgerClientProtocol] = None,
    ):
        self.config = config or get_settings().ledger
        self._ledger: Optional[LedgerClientProtocol] = ledger
        self._owns_ledger = ledger is None
        self._campaign_service: Optional[CampaignService] = None
        self._service: Optional[RouteService] = None

    async def initialize(self) -> None:
        """Initialize all components"""
        logger.info("Initializing Route Service components...")

        shipping_routes_address = require_address(
            self.config.shipping_routes_address, "shipping_routes_address"
        )
        group_purchasing_address = require_address(
            self.config.group_purchasing_address, "group_purchasing_address"
        )
        token_address = require_address(self.config.token_address, "token_address")

        if self._ledger is None:
            self._ledger = GatewayLedgerClient.from_config(self.config)

        fee_policy = build_fee_policy(self.config)
        self._campaign_service = CampaignService(
            ledger=self._ledger,
            group_purchasing_address=group_purchasing_address,
            token_address=token_address,
            fee_policy=fee_policy,
            confirmation_timeout=self.config.confirmation_deadline,
        )
        self._service = RouteService(
            ledger=self._ledger,
            shipping_routes_address=shipping_routes_address,
            campaigns=self._campaign_service,
            fee_policy=fee_policy,
            confirmation_timeout=self.config.confirmation_deadline,
        )

        logger.info("Route Service components initialized")

    async def close(self) -> None:
        """Close all components"""
        logger.info("Closing Route Service components...")

        if self._owns_ledger and isinstance(self._ledger, GatewayLedgerClient):
            await self._ledger.close()
            self._ledger = None
        self._campaign_service = None
        self._service = None

        logger.info("Route Service components closed")

    @property
    def ledger(self) -> LedgerClientProtocol:
        """Get ledger client"""
        if not self._ledger:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._ledger

    @property
    def campaign_service(self) -> CampaignService:
        """Get campaign coordinator"""
        if not self._campaign_service:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._campaign_service

    @property
    def service(self) -> RouteService:
        """Get route service"""
        if not self._service:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._service


# Global factory instance
_factory: Optional[RouteServiceFactory] = None


async def get_factory() -> RouteServiceFactory:
    """Get or create factory instance"""
    global _factory
    if _factory is None:
        _factory = RouteServiceFactory()
        await _factory.initialize()
    return _factory


async def close_factory() -> None:
    """Close factory instance"""
    global _factory
    if _factory:
        await _factory.close()
        _factory = None


__all__ = [
    "RouteServiceFactory",
    "get_factory",
    "close_factory",
]
