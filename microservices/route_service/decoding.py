"""
Route Record Decoding

Positional schemas of the shipping-routes contract. getRoute returns the
route header, getRoutePorts the itinerary, getRouteCampaigns the assigned
campaign slots (zero / empty slots mean "unassigned").
"""

import logging
from typing import Any, List, Sequence

from core.ledger_codec import (
    PositionalField,
    as_bool,
    as_int,
    as_text,
    decode_positional,
    from_epoch,
)
from core.ledger_types import PartialDecodeError

from .models import PortStop, RefrigerationType, Route, RouteStatus

logger = logging.getLogger(__name__)


# getRoute(id)
ROUTE_SCHEMA = (
    PositionalField(0, "ship_id", as_text),
    PositionalField(1, "ship_name", as_text),
    PositionalField(2, "description", as_text),
    PositionalField(3, "departure_port", as_text),
    PositionalField(4, "capacity", as_int),
    PositionalField(5, "refrigeration_type", lambda v: RefrigerationType(as_int(v))),
    PositionalField(6, "status", lambda v: RouteStatus(as_int(v))),
    PositionalField(7, "current_location", as_text),
)

# getRoutePorts(id)[i]
PORT_STOP_SCHEMA = (
    PositionalField(0, "name", as_text),
    PositionalField(1, "code", as_text),
    PositionalField(2, "country", as_text),
    PositionalField(3, "arrival_time", from_epoch),
    PositionalField(4, "visited", as_bool),
)


def decode_port_stops(records: Sequence[Any], route_id: str) -> List[PortStop]:
    """Decode the itinerary, keeping the ledger's order"""
    if records is None or isinstance(records, (str, bytes, dict)):
        raise PartialDecodeError(route_id, "port list is not a sequence")
    return [PortStop(**decode_positional(r, PORT_STOP_SCHEMA, route_id)) for r in records]


def build_route(
    route_id: str,
    record: Sequence[Any],
    port_records: Sequence[Any],
    campaign_ids: Sequence[Any],
) -> Route:
    """Assemble a Route from its three independently fetched parts"""
    logger.debug(f"Decoding route {route_id}: {record!r}")
    fields = decode_positional(record, ROUTE_SCHEMA, route_id)
    ports = decode_port_stops(port_records, route_id)
    try:
        return Route(
            id=route_id,
            **fields,
            ports=ports,
            assigned_campaign_ids=list(campaign_ids or []),
        )
    except ValueError as e:
        raise PartialDecodeError(route_id, str(e))


__all__ = [
    "ROUTE_SCHEMA",
    "PORT_STOP_SCHEMA",
    "decode_port_stops",
    "build_route",
]
