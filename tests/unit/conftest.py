"""
Unit Test Layer Configuration

Structure:
    tests/unit/
    ├── ledger/      Codec helpers, approval cache, session
    ├── campaign/    Decoding, pricing, campaign models
    └── route/       Decoding, itinerary, assignment pool, hub stats

Usage:
    pytest tests/unit -v
    pytest tests/unit -m unit -v
"""
import os
import sys

import pytest

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))


def pytest_collection_modifyitems(config, items):
    """Everything under tests/unit carries the unit marker"""
    for item in items:
        if item.nodeid.startswith("tests/unit/"):
            item.add_marker(pytest.mark.unit)
