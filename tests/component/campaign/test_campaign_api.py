"""
Component Tests for the Campaign Service HTTP API

The service dependency is overridden with a coordinator over the in-memory
ledger. TestLifespan enters the lifespan with the shared factory pre-seeded.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from core.config import LedgerConfig
from microservices.campaign_service import factory as factory_module
from microservices.campaign_service import main
from microservices.campaign_service.factory import CampaignServiceFactory
from microservices.campaign_service.main import app, get_service
from tests.contracts.ledger.data_contract import GP_ADDRESS, TOKEN_ADDRESS


@pytest.fixture
def api(campaign_service):
    app.dependency_overrides[get_service] = lambda: campaign_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(ledger, records):
    ledger.add_campaign(records.make_product_record(
        name="Arabica Beans", creator="0xAAAA000000000000000000000000000000000001", status=0,
    ))
    ledger.add_campaign(
        records.make_container_record(status=1),
        records.make_requirements_record(current_weight_kg=1200),
    )
    ledger.add_campaign(records.make_product_record(name="Cashews", status=2))
    return ledger


class TestHealth:

    def test_health_without_factory(self, api):
        response = api.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["service"] == "campaign_service"
        assert body["status"] == "healthy"

    def test_uninitialized_service(self):
        main.factory = None
        response = TestClient(app).get("/api/v1/campaigns")
        assert response.status_code == 503


class TestListCampaigns:

    def test_list(self, api, seeded):
        response = api.get("/api/v1/campaigns")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        assert [c["id"] for c in body["campaigns"]] == ["1", "2", "3"]
        assert body["campaigns"][0]["campaign_type"] == 0
        assert body["campaigns"][1]["campaign_type"] == 1

    def test_filter_by_creator(self, api, seeded):
        response = api.get(
            "/api/v1/campaigns", params={"creator": "0xaaaa000000000000000000000000000000000001"}
        )
        assert [c["id"] for c in response.json()["campaigns"]] == ["1"]

    def test_filter_by_status(self, api, seeded):
        response = api.get("/api/v1/campaigns", params={"status": "funded,cancelled"})
        assert [c["id"] for c in response.json()["campaigns"]] == ["2", "3"]

    def test_unknown_status(self, api, seeded):
        response = api.get("/api/v1/campaigns", params={"status": "EXPIRED"})

        assert response.status_code == 422
        assert response.json()["field"] == "status"

    def test_joinable(self, api, seeded):
        response = api.get("/api/v1/campaigns", params={"joinable": "true"})
        # funded container campaigns stop accepting joins
        assert [c["id"] for c in response.json()["campaigns"]] == ["1"]


class TestGetCampaign:

    def test_found(self, api, seeded):
        response = api.get("/api/v1/campaigns/1")

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Arabica Beans"
        assert body["unit"] == "sack"

    def test_container_includes_requirements(self, api, seeded):
        body = api.get("/api/v1/campaigns/2").json()
        assert body["requirements"]["current_weight_kg"] == 1200

    def test_not_found(self, api, seeded):
        assert api.get("/api/v1/campaigns/99").status_code == 404

    def test_requirements(self, api, seeded):
        response = api.get("/api/v1/campaigns/2/requirements")

        assert response.status_code == 200
        assert response.json()["max_weight_kg"] == 25000

    def test_requirements_of_product(self, api, seeded):
        assert api.get("/api/v1/campaigns/1/requirements").status_code == 404


class TestQuote:

    def test_product_quote(self, api, seeded):
        response = api.get("/api/v1/campaigns/1/quote", params={"quantity": 50})

        assert response.status_code == 200
        assert response.json()["quantity"] == 50
        assert float(response.json()["payment"]) == 275.0

    def test_container_quote(self, api, seeded):
        response = api.get("/api/v1/campaigns/2/quote", params={"weight_kg": 100})

        assert response.status_code == 200
        assert float(response.json()["payment"]) == 60.0

    def test_requires_exactly_one(self, api, seeded):
        assert api.get("/api/v1/campaigns/1/quote").status_code == 422
        assert api.get(
            "/api/v1/campaigns/1/quote", params={"quantity": 1, "weight_kg": 1}
        ).status_code == 422

    def test_invalid_weight(self, api, seeded):
        response = api.get("/api/v1/campaigns/2/quote", params={"weight_kg": 0})

        assert response.status_code == 422
        assert response.json()["field"] == "weight_kg"

    def test_invalid_quantity(self, api, seeded):
        response = api.get("/api/v1/campaigns/1/quote", params={"quantity": 0})

        assert response.status_code == 422
        assert response.json()["field"] == "quantity"

    def test_zero_capacity_container(self, api, ledger, records):
        ledger.add_campaign(records.make_container_record(), records.make_requirements_record(max_weight_kg=0))

        assert api.get("/api/v1/campaigns/1/quote", params={"weight_kg": 100}).status_code == 404

    def test_wrong_variant(self, api, seeded):
        response = api.get("/api/v1/campaigns/1/quote", params={"weight_kg": 10})
        assert response.status_code == 404


class TestLifespan:

    def test_shared_factory(self, ledger, seeded, monkeypatch):
        config = LedgerConfig(
            token_address=TOKEN_ADDRESS,
            group_purchasing_address=GP_ADDRESS,
            confirmation_timeout=0,
        )
        shared = CampaignServiceFactory(config, ledger=ledger)
        asyncio.run(shared.initialize())
        monkeypatch.setattr(factory_module, "_factory", shared)

        with TestClient(app) as client:
            assert main.factory is shared
            assert client.get("/api/v1/campaigns").json()["total"] == 3

        assert factory_module._factory is None
        assert main.factory is None
