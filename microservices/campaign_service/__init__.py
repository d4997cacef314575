"""
Campaign Service

Campaign Coordinator over the group-purchasing ledger contract:
- Decoding of positional ledger records into Product / Container campaigns
- Per-account approval caching and approve-then-join sequencing
- Product cost and container per-kg pricing
- Campaign creation and cancellation

Port: 8260
"""

__version__ = "1.0.0"
__service__ = "campaign_service"
