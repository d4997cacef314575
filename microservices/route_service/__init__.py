"""
Route Service

Route Coordinator over the shipping-routes ledger contract:
- Route and itinerary decoding with sentinel-free assignment sets
- Derivation of the campaign assignment pool (one route per campaign)
- Route lifecycle writes: create, assign, status, port visits, completion

Port: 8261
"""

__version__ = "1.0.0"
__service__ = "route_service"
