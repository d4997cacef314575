"""
Route Itinerary

Conversions between the ordered port list and the flat parallel arrays the
createRoute call takes.
"""

from typing import Any, List, Optional, Sequence, Tuple

from core.ledger_codec import to_epoch
from core.ledger_types import LedgerValidationError

from .models import PortStop, PortStopInput


def split_port_stops(
    stops: Sequence[PortStopInput],
) -> Tuple[List[str], List[str], List[str], List[int]]:
    """
    Decompose stops into (names, codes, countries, arrival epochs).

    The four lists always have the same length and index order.
    """
    names: List[str] = []
    codes: List[str] = []
    countries: List[str] = []
    arrivals: List[int] = []
    for i, stop in enumerate(stops):
        names.append(stop.name)
        codes.append(stop.code)
        countries.append(stop.country)
        arrivals.append(to_epoch(stop.arrival_time, field=f"ports.{i}.arrival_time"))
    return names, codes, countries, arrivals


def next_port(ports: Sequence[PortStop]) -> Optional[PortStop]:
    """First unvisited stop in stored order; arrival times are not consulted"""
    for port in ports:
        if not port.visited:
            return port
    return None


def with_port_visited(ports: Sequence[PortStop], port_index: Any) -> List[PortStop]:
    """Copy of the itinerary with only stop `port_index` marked visited"""
    index = validate_port_index(ports, port_index)
    return [
        p.model_copy(update={"visited": True}) if i == index else p
        for i, p in enumerate(ports)
    ]


def validate_port_index(ports: Optional[Sequence[PortStop]], port_index: Any) -> int:
    if isinstance(port_index, bool):
        raise LedgerValidationError("port_index must be an integer", field="port_index")
    try:
        index = int(port_index)
    except (TypeError, ValueError):
        raise LedgerValidationError("port_index must be an integer", field="port_index")
    if index < 0 or (ports is not None and index >= len(ports)):
        raise LedgerValidationError(f"port_index out of range: {port_index}", field="port_index")
    return index


__all__ = [
    "split_port_stops",
    "next_port",
    "with_port_visited",
    "validate_port_index",
]
