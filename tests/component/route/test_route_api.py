"""
Component Tests for the Route Service HTTP API

The module-level factory is replaced with one built over the in-memory
ledger. TestLifespan enters the lifespan with that factory pre-seeded as the
shared one.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from core.config import LedgerConfig
from core.ledger_types import LedgerValidationError
from microservices.route_service import factory as factory_module
from microservices.route_service import main
from microservices.route_service.factory import RouteServiceFactory
from microservices.route_service.main import app
from tests.contracts.ledger.data_contract import GP_ADDRESS, ROUTES_ADDRESS, TOKEN_ADDRESS

FUNDED = 1


def _config(**overrides) -> LedgerConfig:
    values = dict(
        token_address=TOKEN_ADDRESS,
        group_purchasing_address=GP_ADDRESS,
        shipping_routes_address=ROUTES_ADDRESS,
        confirmation_timeout=0,
    )
    values.update(overrides)
    return LedgerConfig(**values)


@pytest.fixture
def route_factory(ledger):
    factory = RouteServiceFactory(_config(), ledger=ledger)
    asyncio.run(factory.initialize())
    yield factory
    asyncio.run(factory.close())


@pytest.fixture
def api(route_factory):
    main.factory = route_factory
    yield TestClient(app)
    main.factory = None


@pytest.fixture
def seeded(ledger, records):
    ledger.add_campaign(records.make_product_record(status=FUNDED, current_amount="550"))
    ledger.add_campaign(records.make_product_record(status=FUNDED))
    ledger.add_campaign(records.make_product_record(status=0))
    ledger.add_route(records.make_route_record(ship_name="MSC Aurora"), records.make_itinerary(2), ["1"])
    ledger.add_route(records.make_route_record(ship_name="Maersk Kowloon"), records.make_itinerary(3), [0, ""])
    return ledger


class TestFactory:

    def test_shares_one_ledger(self, route_factory, ledger):
        assert route_factory.ledger is ledger
        assert route_factory.service.ledger is ledger
        assert route_factory.service.campaigns is route_factory.campaign_service
        assert route_factory.service.confirmation_timeout is None

    @pytest.mark.asyncio
    async def test_missing_address(self, ledger):
        factory = RouteServiceFactory(_config(shipping_routes_address=""), ledger=ledger)

        with pytest.raises(LedgerValidationError) as exc:
            await factory.initialize()
        assert exc.value.field == "shipping_routes_address"

    def test_uninitialized(self, ledger):
        factory = RouteServiceFactory(_config(), ledger=ledger)
        with pytest.raises(RuntimeError):
            factory.service


class TestRouteApi:

    def test_health(self, api):
        body = api.get("/health").json()
        assert body["service"] == "route_service"
        assert body["dependencies"] == {"ledger_gateway": "not_configured"}

    def test_list_routes(self, api, seeded):
        response = api.get("/api/v1/routes")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert [r["ship_name"] for r in body["routes"]] == ["MSC Aurora", "Maersk Kowloon"]
        assert body["routes"][1]["assigned_campaign_ids"] == []

    def test_get_route(self, api, seeded):
        response = api.get("/api/v1/routes/0")

        assert response.status_code == 200
        body = response.json()
        assert [p["name"] for p in body["ports"]] == ["Lagos", "Tema"]
        assert body["assigned_campaign_ids"] == ["1"]

    def test_route_not_found(self, api, seeded):
        assert api.get("/api/v1/routes/42").status_code == 404

    def test_assignable_campaigns(self, api, seeded):
        response = api.get("/api/v1/routes/assignable-campaigns")

        assert response.status_code == 200
        assert [c["id"] for c in response.json()["campaigns"]] == ["2"]

    def test_stats(self, api, seeded):
        body = api.get("/api/v1/routes/stats").json()

        assert body["active_campaigns"] == 1
        assert body["active_routes"] == 2
        assert float(body["total_volume"]) == 550.0
        # Walvis Bay, Lagos, Tema, Abidjan
        assert body["port_count"] == 4

    def test_uninitialized_service(self):
        main.factory = None
        assert TestClient(app).get("/api/v1/routes").status_code == 503


class TestLifespan:

    def test_shared_factory(self, route_factory, seeded, monkeypatch):
        monkeypatch.setattr(factory_module, "_factory", route_factory)

        with TestClient(app) as client:
            assert main.factory is route_factory
            assert client.get("/api/v1/routes").json()["total"] == 2

        assert factory_module._factory is None
        assert main.factory is None
