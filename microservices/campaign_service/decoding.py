"""
Campaign Record Decoding

The positional schemas of the group-purchasing contract's read calls. These
tables are the compatibility contract with the ledger: slot order must match
the contract exactly, a reordering silently corrupts every decoded campaign.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from core.ledger_codec import (
    PositionalField,
    as_bool,
    as_int,
    as_text,
    decode_positional,
    from_epoch,
    from_fixed,
)
from core.ledger_types import PartialDecodeError

from .models import (
    Campaign,
    CampaignStatus,
    CampaignType,
    ContainerCampaign,
    ContainerRequirements,
    ContainerType,
    Direction,
    ProductCampaign,
)

logger = logging.getLogger(__name__)


# getCampaign(id)
CAMPAIGN_SCHEMA = (
    PositionalField(0, "creator", as_text),
    PositionalField(1, "campaign_type", lambda v: CampaignType(as_int(v))),
    PositionalField(2, "direction", lambda v: Direction(as_int(v))),
    PositionalField(3, "name", as_text),
    PositionalField(4, "description", as_text),
    PositionalField(5, "min_quantity", as_int),
    PositionalField(6, "current_quantity", as_int),
    PositionalField(7, "price_per_unit", from_fixed),
    PositionalField(8, "unit", as_text),
    PositionalField(9, "target_amount", from_fixed),
    PositionalField(10, "current_amount", from_fixed),
    PositionalField(11, "deadline", from_epoch),
    PositionalField(12, "status", lambda v: CampaignStatus(as_int(v))),
    PositionalField(13, "created_at", from_epoch),
    PositionalField(14, "participant_count", as_int),
    PositionalField(15, "origin_port", as_text),
    PositionalField(16, "destination_port", as_text),
)

# getContainerRequirements(id)
CONTAINER_REQUIREMENTS_SCHEMA = (
    PositionalField(0, "container_type", lambda v: ContainerType(as_int(v))),
    PositionalField(1, "min_temp_celsius", as_int),
    PositionalField(2, "max_temp_celsius", as_int),
    PositionalField(3, "max_weight_kg", as_int),
    PositionalField(4, "current_weight_kg", as_int),
    PositionalField(5, "requires_ventilation", as_bool),
    PositionalField(6, "requires_refrigeration", as_bool),
)

_COMMON_FIELDS = (
    "creator",
    "direction",
    "name",
    "description",
    "target_amount",
    "current_amount",
    "deadline",
    "status",
    "created_at",
    "participant_count",
)
_PRODUCT_FIELDS = ("min_quantity", "current_quantity", "price_per_unit", "unit")
_CONTAINER_FIELDS = ("origin_port", "destination_port")


def decode_campaign_fields(record: Sequence[Any], campaign_id: str) -> Dict[str, Any]:
    """Decode a getCampaign tuple into named fields"""
    logger.debug(f"Decoding campaign {campaign_id}: {record!r}")
    return decode_positional(record, CAMPAIGN_SCHEMA, campaign_id)


def decode_container_requirements(record: Sequence[Any], campaign_id: str) -> ContainerRequirements:
    """Decode a getContainerRequirements tuple"""
    fields = decode_positional(record, CONTAINER_REQUIREMENTS_SCHEMA, campaign_id)
    try:
        return ContainerRequirements(**fields)
    except ValueError as e:
        raise PartialDecodeError(campaign_id, f"container requirements: {e}")


def build_campaign(
    campaign_id: str,
    fields: Dict[str, Any],
    requirements: Optional[ContainerRequirements] = None,
) -> Campaign:
    """
    Assemble the typed variant from decoded fields.

    Product campaigns drop the port slots; container campaigns drop the
    quantity/price slots and must carry their requirements.
    """
    common = {name: fields[name] for name in _COMMON_FIELDS}
    try:
        if fields["campaign_type"] == CampaignType.PRODUCT:
            return ProductCampaign(
                id=campaign_id,
                **common,
                **{name: fields[name] for name in _PRODUCT_FIELDS},
            )
        if requirements is None:
            raise PartialDecodeError(campaign_id, "container campaign without requirements")
        return ContainerCampaign(
            id=campaign_id,
            **common,
            **{name: fields[name] for name in _CONTAINER_FIELDS},
            requirements=requirements,
        )
    except ValueError as e:
        raise PartialDecodeError(campaign_id, str(e))


__all__ = [
    "CAMPAIGN_SCHEMA",
    "CONTAINER_REQUIREMENTS_SCHEMA",
    "decode_campaign_fields",
    "decode_container_requirements",
    "build_campaign",
]
