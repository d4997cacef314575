#!/usr/bin/env python3
"""Modular configuration system for the trade hub services

Configuration hierarchy:
- ledger_config: Ledger gateway URL, contract addresses, fee policy, timeouts
- logging_config: Logging configuration
- hub_config: Service ports and the aggregate of the above
"""
import os
from dotenv import load_dotenv
from .hub_config import HubConfig
from .ledger_config import LedgerConfig
from .logging_config import LoggingConfig

# Load environment file based on ENV
env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
env_files = {
    "development": "deployment/environments/dev.env",
    "dev": "deployment/environments/dev.env",
    "testing": "deployment/environments/test.env",
    "test": "deployment/environments/test.env",
    "staging": "deployment/environments/staging.env",
    "production": "deployment/environments/production.env",
}
env_file = env_files.get(env, "deployment/environments/dev.env")
load_dotenv(env_file, override=False)

# Create global settings instance
settings = HubConfig.from_env()

def get_settings() -> HubConfig:
    """Get global settings instance"""
    return settings

def reload_settings() -> HubConfig:
    """Reload settings from environment"""
    global settings
    settings = HubConfig.from_env()
    return settings

__all__ = [
    'HubConfig',
    'get_settings',
    'reload_settings',
    'settings',
    'LedgerConfig',
    'LoggingConfig',
]
