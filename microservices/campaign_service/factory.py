"""
Campaign Service Factory

Factory for creating campaign service instances with proper dependency injection.
"""

import logging
from typing import Optional

from core.config import LedgerConfig, get_settings
from core.ledger_client import GatewayLedgerClient
from core.ledger_codec import require_address
from core.ledger_types import FeePolicy

from .campaign_service import CampaignService
from .protocols import LedgerClientProtocol

logger = logging.getLogger(__name__)


def build_fee_policy(config: LedgerConfig) -> FeePolicy:
    return FeePolicy(
        max_fee_per_gas=config.max_fee_per_gas,
        max_priority_fee_per_gas=config.max_priority_fee_per_gas,
    )


class CampaignServiceFactory:
    """Factory for creating campaign service components"""

    def __init__(
        self,
        config: Optional[LedgerConfig] = None,
        ledger: Optional[LedgerClientProtocol] = None,
    ):
        self.config = config or get_settings().ledger
        self._ledger: Optional[LedgerClientProtocol] = ledger
        self._owns_ledger = ledger is None
        self._service: Optional[CampaignService] = None

    async def initialize(self) -> None:
        """Initialize all components"""
        logger.info("Initializing Campaign Service components...")

        token_address = require_address(self.config.token_address, "token_address")
        group_purchasing_address = require_address(
            self.config.group_purchasing_address, "group_purchasing_address"
        )

        if self._ledger is None:
            self._ledger = GatewayLedgerClient.from_config(self.config)

        self._service = CampaignService(
            ledger=self._ledger,
            group_purchasing_address=group_purchasing_address,
            token_address=token_address,
            fee_policy=build_fee_policy(self.config),
            confirmation_timeout=self.config.confirmation_deadline,
        )

        logger.info("Campaign Service components initialized")

    async def close(self) -> None:
        """Close all components"""
        logger.info("Closing Campaign Service components...")

        if self._owns_ledger and isinstance(self._ledger, GatewayLedgerClient):
            await self._ledger.close()
            self._ledger = None
        self._service = None

        logger.info("Campaign Service components closed")

    @property
    def ledger(self) -> LedgerClientProtocol:
        """Get ledger client"""
        if not self._ledger:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._ledger

    @property
    def service(self) -> CampaignService:
        """Get campaign service"""
        if not self._service:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._service


# Global factory instance
_factory: Optional[CampaignServiceFactory] = None


async def get_factory() -> CampaignServiceFactory:
    """Get or create factory instance"""
    global _factory
    if _factory is None:
        _factory = CampaignServiceFactory()
        await _factory.initialize()
    return _factory


async def close_factory() -> None:
    """Close factory instance"""
    global _factory
    if _factory:
        await _factory.close()
        _factory = None


__all__ = [
    "CampaignServiceFactory",
    "build_fee_policy",
    "get_factory",
    "close_factory",
]
