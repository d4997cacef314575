"""
Unit Tests for route decoding and itinerary handling
"""

import pytest
from datetime import datetime, timedelta, timezone

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from core.ledger_types import LedgerValidationError, PartialDecodeError
from microservices.route_service.decoding import ROUTE_SCHEMA, build_route
from microservices.route_service.itinerary import (
    next_port,
    split_port_stops,
    validate_port_index,
    with_port_visited,
)
from microservices.route_service.models import (
    PortStopInput,
    RefrigerationType,
    RouteCreateRequest,
    RouteStatus,
)

T0 = datetime(2026, 2, 1, tzinfo=timezone.utc)


class TestRouteDecoding:

    def test_route_slot_order(self):
        assert [f.name for f in ROUTE_SCHEMA] == [
            "ship_id", "ship_name", "description", "departure_port",
            "capacity", "refrigeration_type", "status", "current_location",
        ]

    def test_build_route(self, records):
        route = build_route(
            "0",
            records.make_route_record(status=1, current_location="Lagos"),
            records.make_itinerary(3),
            ["4", 0, "", "6"],
        )
        assert route.id == "0"
        assert route.ship_name == "MSC Aurora"
        assert route.capacity == 40
        assert route.refrigeration_type == RefrigerationType.STANDARD
        assert route.status == RouteStatus.IN_TRANSIT
        assert route.current_location == "Lagos"
        assert [p.name for p in route.ports] == ["Lagos", "Tema", "Abidjan"]
        assert route.ports[0].arrival_time.tzinfo is not None
        assert route.assigned_campaign_ids == ["4", "6"]

    def test_bad_port_record(self, records):
        ports = records.make_itinerary(2)
        ports[1] = ["Tema", "GHTEM"]
        with pytest.raises(PartialDecodeError):
            build_route("1", records.make_route_record(), ports, [])

    def test_unknown_route_status(self, records):
        with pytest.raises(PartialDecodeError):
            build_route("1", records.make_route_record(status=5), [], [])


class TestSplitPortStops:

    def test_parallel_arrays_share_order(self):
        stops = [
            PortStopInput(name="Lagos", code="NGLOS", country="Nigeria", arrival_time=T0),
            PortStopInput(name="Tema", code="GHTEM", country="Ghana", arrival_time=T0 + timedelta(days=2)),
            PortStopInput(name="Dakar", code="SNDKR", country="Senegal", arrival_time=T0 + timedelta(days=1)),
        ]

        names, codes, countries, arrivals = split_port_stops(stops)

        assert names == ["Lagos", "Tema", "Dakar"]
        assert codes == ["NGLOS", "GHTEM", "SNDKR"]
        assert countries == ["Nigeria", "Ghana", "Senegal"]
        assert arrivals == [
            int(T0.timestamp()),
            int((T0 + timedelta(days=2)).timestamp()),
            int((T0 + timedelta(days=1)).timestamp()),
        ]

    def test_route_request_requires_ports(self, records):
        with pytest.raises(ValueError):
            RouteCreateRequest.model_validate(records.make_route_create_request(ports=[]))


class TestPortVisits:

    def _ports(self, records):
        return build_route("0", records.make_route_record(), records.make_itinerary(4), []).ports

    def test_next_port_is_first_unvisited(self, records):
        ports = self._ports(records)
        assert next_port(ports).name == "Lagos"

    def test_mark_only_changes_target(self, records):
        ports = self._ports(records)

        updated = with_port_visited(ports, 1)

        assert [p.visited for p in updated] == [False, True, False, False]
        assert [p.name for p in updated] == [p.name for p in ports]
        assert [p.visited for p in ports] == [False, False, False, False]

    def test_next_port_uses_sequence_order(self, records):
        ports = with_port_visited(self._ports(records), 0)
        assert next_port(ports).name == "Tema"

        ports = with_port_visited(ports, 2)
        assert next_port(ports).name == "Tema"

    def test_next_port_ignores_arrival_times(self, records):
        raw = records.make_itinerary(3)
        raw[2][3] = str(int(T0.timestamp()) - 86400 * 30)
        ports = build_route("0", records.make_route_record(), raw, []).ports
        assert next_port(ports).name == "Lagos"

    def test_all_visited(self, records):
        ports = self._ports(records)
        for i in range(len(ports)):
            ports = with_port_visited(ports, i)
        assert next_port(ports) is None

    @pytest.mark.parametrize("index", [-1, 4, "x", True])
    def test_index_out_of_range(self, records, index):
        with pytest.raises(LedgerValidationError):
            with_port_visited(self._ports(records), index)

    def test_unbounded_index_check(self):
        assert validate_port_index(None, 12) == 12
