"""
Route Service Models

Shipping routes decoded from the shipping-routes ledger contract, their
ordered port itinerary, and the request models validated before writes.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.ledger_codec import filter_sentinel_ids


# ====================
# Enums (ledger integer codes)
# ====================


class RouteStatus(int, Enum):
    """Ledger-held route status"""
    SCHEDULED = 0
    IN_TRANSIT = 1
    COMPLETED = 2


class RefrigerationType(int, Enum):
    """Refrigeration offered by the ship"""
    NONE = 0
    STANDARD = 1
    DEEP_FREEZE = 2
    CLIMATE_CONTROLLED = 3


# ====================
# Entities
# ====================


class PortStop(BaseModel):
    """One stop of a route's itinerary"""
    model_config = ConfigDict(from_attributes=True)

    name: str
    code: str = ""
    country: str = ""
    arrival_time: datetime
    visited: bool = False


class Route(BaseModel):
    """A scheduled itinerary; port order is the stored sequence order"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    ship_id: str = ""
    ship_name: str = ""
    description: str = ""
    departure_port: str = ""
    capacity: int = Field(default=0, ge=0)
    refrigeration_type: RefrigerationType = RefrigerationType.NONE
    status: RouteStatus
    current_location: str = ""
    ports: List[PortStop] = Field(default_factory=list)
    assigned_campaign_ids: List[str] = Field(default_factory=list)

    @field_validator("assigned_campaign_ids", mode="before")
    @classmethod
    def _drop_sentinels(cls, v: Any) -> List[str]:
        return filter_sentinel_ids(v)


# ====================
# Requests
# ====================


class PortStopInput(BaseModel):
    """One stop of a route being created"""
    name: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    arrival_time: datetime

    @field_validator("name", "code", "country")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class RouteCreateRequest(BaseModel):
    """Fields for createRoute"""
    ship_id: str = Field(..., min_length=1)
    ship_name: str = Field(..., min_length=1)
    description: str = ""
    departure_port: str = Field(..., min_length=1)
    ports: List[PortStopInput] = Field(..., min_length=1)
    capacity: int = Field(..., gt=0)
    refrigeration_type: RefrigerationType = RefrigerationType.NONE

    @field_validator("ship_id", "ship_name", "departure_port")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("refrigeration_type", mode="before")
    @classmethod
    def _blank_refrigeration(cls, v: Any) -> Any:
        return RefrigerationType.NONE if v in (None, "") else v


# ====================
# Service Models
# ====================


class HubStats(BaseModel):
    """Headline numbers for the hub dashboard"""
    active_campaigns: int = 0
    total_volume: Decimal = Decimal(0)
    active_routes: int = 0
    port_count: int = 0


class RouteListResponse(BaseModel):
    """Listing response"""
    routes: List[Route]
    total: int


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    port: int
    version: str
    dependencies: Dict[str, str] = Field(default_factory=dict)


__all__ = [
    "RouteStatus",
    "RefrigerationType",
    "PortStop",
    "Route",
    "PortStopInput",
    "RouteCreateRequest",
    "HubStats",
    "RouteListResponse",
    "HealthResponse",
]
