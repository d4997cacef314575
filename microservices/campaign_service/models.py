"""
Campaign Service Models

Typed entities decoded from the group-purchasing ledger, and the request
models the coordinator validates before issuing any write.

A campaign is a tagged variant discriminated by ``campaign_type``:
ProductCampaign carries quantity/pricing fields, ContainerCampaign carries
ports and its ContainerRequirements.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Dict, Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ====================
# Enums (ledger integer codes)
# ====================


class CampaignType(int, Enum):
    """Campaign variant"""
    PRODUCT = 0
    CONTAINER = 1


class CampaignStatus(int, Enum):
    """Ledger-held campaign status; never computed client-side"""
    ACTIVE = 0
    FUNDED = 1
    CANCELLED = 2
    COMPLETED = 3


class Direction(int, Enum):
    """Trade direction relative to the hub"""
    INBOUND = 0
    OUTBOUND = 1


class ContainerType(int, Enum):
    """Container sizes accepted by the ledger"""
    STANDARD_20 = 0
    STANDARD_40 = 1
    HIGH_CUBE_40 = 2
    HIGH_CUBE_45 = 3
    REFRIGERATED_20 = 4
    REFRIGERATED_40 = 5

    @classmethod
    def parse(cls, value: Any) -> "ContainerType":
        """Accept the symbolic name or the ledger code; unknown names fall back to STANDARD_20"""
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return cls(int(text))
            return cls.__members__.get(text.upper(), cls.STANDARD_20)
        raise ValueError(f"Unsupported container type: {value!r}")


JOINABLE_STATUSES = {
    CampaignType.PRODUCT: {CampaignStatus.ACTIVE, CampaignStatus.FUNDED},
    CampaignType.CONTAINER: {CampaignStatus.ACTIVE},
}


# ====================
# Entities
# ====================


class ContainerRequirements(BaseModel):
    """Shipping constraints of a container campaign"""
    model_config = ConfigDict(from_attributes=True)

    container_type: ContainerType
    min_temp_celsius: int = 0
    max_temp_celsius: int = 0
    max_weight_kg: int = Field(..., ge=0)
    current_weight_kg: int = Field(default=0, ge=0)
    requires_ventilation: bool = False
    requires_refrigeration: bool = False

    @property
    def remaining_weight_kg(self) -> int:
        return max(self.max_weight_kg - self.current_weight_kg, 0)


class CampaignBase(BaseModel):
    """Fields shared by both campaign variants"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    creator: str = ""
    direction: Direction
    name: str
    description: str = ""
    target_amount: Decimal
    current_amount: Decimal
    deadline: datetime
    status: CampaignStatus
    created_at: datetime
    participant_count: int = Field(default=0, ge=0)

    @property
    def is_joinable(self) -> bool:
        """Product campaigns take joins while Active or Funded, containers only while Active"""
        return self.status in JOINABLE_STATUSES[self.campaign_type]

    @property
    def funding_progress(self) -> Decimal:
        """Percent of target raised; not capped at 100"""
        if not self.target_amount:
            return Decimal(0)
        return self.current_amount / self.target_amount * 100

    def is_created_by(self, address: Optional[str]) -> bool:
        return bool(address) and bool(self.creator) and self.creator.lower() == address.lower()


class ProductCampaign(CampaignBase):
    """Group purchase of a single product, priced per unit"""
    campaign_type: Literal[CampaignType.PRODUCT] = CampaignType.PRODUCT
    min_quantity: int = Field(default=0, ge=0)
    current_quantity: int = Field(default=0, ge=0)
    price_per_unit: Decimal = Decimal(0)
    unit: str = ""


class ContainerCampaign(CampaignBase):
    """Shared container shipment, priced per kg of capacity"""
    campaign_type: Literal[CampaignType.CONTAINER] = CampaignType.CONTAINER
    origin_port: str = ""
    destination_port: str = ""
    requirements: ContainerRequirements


Campaign = Annotated[
    Union[ProductCampaign, ContainerCampaign],
    Field(discriminator="campaign_type"),
]


def campaigns_created_by(campaigns: Iterable[CampaignBase], address: str) -> List[CampaignBase]:
    """Campaigns whose creator matches the address, case-insensitively"""
    return [c for c in campaigns if c.is_created_by(address)]


# ====================
# Requests
# ====================


class ProductCampaignCreateRequest(BaseModel):
    """Fields for createSingleProductCampaign"""
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=2000)
    min_quantity: int = Field(..., ge=1)
    price_per_unit: Decimal = Field(..., gt=0)
    unit: str = Field(..., min_length=1, max_length=50)
    target_amount: Decimal = Field(..., gt=0)
    deadline: datetime

    @field_validator("name", "unit")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ContainerCampaignCreateRequest(BaseModel):
    """Fields for createContainerCampaign"""
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=2000)
    direction: Direction = Direction.INBOUND
    origin_port: str = Field(..., min_length=1)
    destination_port: str = Field(..., min_length=1)
    container_type: ContainerType = ContainerType.STANDARD_20
    min_temp_celsius: int = 0
    max_temp_celsius: int = 0
    max_weight_kg: int = Field(..., gt=0)
    requires_ventilation: bool = False
    requires_refrigeration: bool = False
    target_amount: Decimal = Field(..., gt=0)
    deadline: datetime

    @field_validator("name", "origin_port", "destination_port")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("container_type", mode="before")
    @classmethod
    def _parse_container_type(cls, v: Any) -> ContainerType:
        return ContainerType.parse(v)

    @field_validator("min_temp_celsius", "max_temp_celsius", mode="before")
    @classmethod
    def _blank_temperature(cls, v: Any) -> Any:
        return 0 if v in (None, "") else v


class JoinQuote(BaseModel):
    """Price shown to a participant before joining"""
    campaign_id: str
    payment: Decimal
    price_per_kg: Optional[Decimal] = None
    weight_kg: Optional[int] = None
    quantity: Optional[int] = None


# ====================
# Service Models
# ====================


class CampaignListResponse(BaseModel):
    """Listing response"""
    campaigns: List[Campaign]
    total: int


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    port: int
    version: str
    dependencies: Dict[str, str] = Field(default_factory=dict)


__all__ = [
    "CampaignType",
    "CampaignStatus",
    "Direction",
    "ContainerType",
    "JOINABLE_STATUSES",
    "ContainerRequirements",
    "CampaignBase",
    "ProductCampaign",
    "ContainerCampaign",
    "Campaign",
    "campaigns_created_by",
    "ProductCampaignCreateRequest",
    "ContainerCampaignCreateRequest",
    "JoinQuote",
    "CampaignListResponse",
    "HealthResponse",
]
