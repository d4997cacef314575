#!/usr/bin/env python3
"""Top-level configuration for the trade hub services"""
import os
from dataclasses import dataclass, field

from .ledger_config import LedgerConfig
from .logging_config import LoggingConfig


def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass
class HubConfig:
    """Aggregated settings for campaign_service and route_service"""
    environment: str = "development"
    debug: bool = False

    campaign_service_port: int = 8260
    route_service_port: int = 8261

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)

    @classmethod
    def from_env(cls) -> 'HubConfig':
        """Load all settings from environment variables"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        return cls(
            environment=env,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            campaign_service_port=_int(os.getenv("CAMPAIGN_SERVICE_PORT", ""), 8260),
            route_service_port=_int(os.getenv("ROUTE_SERVICE_PORT", ""), 8261),
            logging=LoggingConfig.from_env(),
            ledger=LedgerConfig.from_env(),
        )
