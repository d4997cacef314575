"""
Route Service Business Logic

Route Coordinator: decodes shipping routes, derives which funded campaigns
are still free to assign, and issues the route lifecycle writes.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from core.ledger_codec import as_bool, require_id
from core.ledger_session import SessionContext
from core.ledger_types import (
    FeePolicy,
    LedgerCoordinatorError,
    LedgerResponse,
    LedgerValidationError,
    PartialDecodeError,
    RemoteCallError,
    TransactionReceipt,
)

from microservices.campaign_service.models import Campaign

from .assignment import ASSIGNABLE_STATUSES, assignable_campaigns
from .decoding import build_route
from .hub_stats import summarize_hub
from .itinerary import split_port_stops, validate_port_index
from .models import HubStats, Route, RouteCreateRequest, RouteStatus
from .protocols import CampaignCatalogProtocol, LedgerClientProtocol

logger = logging.getLogger(__name__)


def _route_id(raw: Any) -> str:
    return require_id(raw, "route_id", allow_zero=True)


def _validation_error(exc: ValidationError) -> LedgerValidationError:
    first = exc.errors()[0]
    field = ".".join(str(p) for p in first.get("loc", ())) or None
    return LedgerValidationError(f"{field}: {first.get('msg')}" if field else first.get("msg"), field=field)


def _parse_status(value: Any) -> RouteStatus:
    if isinstance(value, RouteStatus):
        return value
    try:
        if isinstance(value, str) and not value.strip().isdigit():
            return RouteStatus[value.strip().upper()]
        if isinstance(value, bool):
            raise ValueError(value)
        return RouteStatus(int(value))
    except (KeyError, TypeError, ValueError):
        raise LedgerValidationError(f"Unknown route status: {value!r}", field="status")


class RouteService:
    """Route coordinator over the shipping-routes contract"""

    def __init__(
        self,
        ledger: LedgerClientProtocol,
        shipping_routes_address: str,
        campaigns: CampaignCatalogProtocol,
        fee_policy: FeePolicy,
        confirmation_timeout: Optional[float] = None,
    ):
        self.ledger = ledger
        self.shipping_routes_address = shipping_routes_address
        self.campaigns = campaigns
        self.fee_policy = fee_policy
        self.confirmation_timeout = confirmation_timeout

    async def _submit(self, session: SessionContext, function: str, args: Sequence[Any]) -> TransactionReceipt:
        """Submit one write and wait for its confirmation"""
        tx_hash = await self.ledger.send(
            self.shipping_routes_address, function, list(args), session.signer, self.fee_policy
        )
        logger.info(f"{function} submitted by {session.account}: {tx_hash}")
        return await self.ledger.wait_for_receipt(tx_hash, timeout=self.confirmation_timeout)

    async def _write(
        self,
        session: SessionContext,
        function: str,
        args: List[Any],
        message: str,
        failure: str,
        entity_id: Optional[str] = None,
    ) -> LedgerResponse:
        try:
            receipt = await self._submit(session, function, args)
        except RemoteCallError as e:
            logger.error(f"{function} error: {e}")
            return LedgerResponse.failed(e, failure)
        return LedgerResponse.ok(message, tx_hash=receipt.tx_hash, entity_id=entity_id)

    # ====================
    # Creation
    # ====================

    async def create_route(
        self,
        session: SessionContext,
        request: Union[RouteCreateRequest, Dict[str, Any]],
    ) -> LedgerResponse:
        """Create a route; the itinerary is sent as four parallel arrays"""
        try:
            if not isinstance(request, RouteCreateRequest):
                request = RouteCreateRequest.model_validate(request)
            names, codes, countries, arrivals = split_port_stops(request.ports)
        except ValidationError as e:
            return LedgerResponse.failed(_validation_error(e), "Invalid route")
        except LedgerValidationError as e:
            return LedgerResponse.failed(e, "Invalid route")

        args = [
            request.ship_id,
            request.ship_name,
            request.description,
            request.departure_port,
            names,
            codes,
            countries,
            arrivals,
            request.capacity,
            int(request.refrigeration_type),
        ]
        try:
            receipt = await self._submit(session, "createRoute", args)
        except RemoteCallError as e:
            logger.error(f"Create route error: {e}")
            return LedgerResponse.failed(e, "Failed to create route")

        try:
            total = int(await self.ledger.call(self.shipping_routes_address, "getTotalRoutes"))
        except (RemoteCallError, TypeError, ValueError) as e:
            logger.error(f"Route created but total read failed: {e}")
            return LedgerResponse.ok("Route created; id could not be read back", tx_hash=receipt.tx_hash)

        route_id = str(total - 1)
        logger.info(f"Route created: {route_id} ({request.ship_name})")
        return LedgerResponse.ok("Route created successfully", tx_hash=receipt.tx_hash, entity_id=route_id)

    # ====================
    # Reads
    # ====================

    async def _fetch_route(self, route_id: str) -> Route:
        numeric_id = int(route_id)
        record = await self.ledger.call(self.shipping_routes_address, "getRoute", numeric_id)
        ports = await self.ledger.call(self.shipping_routes_address, "getRoutePorts", numeric_id)
        campaign_ids = await self.ledger.call(self.shipping_routes_address, "getRouteCampaigns", numeric_id)
        return build_route(route_id, record, ports, campaign_ids)

    async def list_active_routes(self) -> List[Route]:
        """Every decodable active route, in the ledger's order; bad records are skipped"""
        try:
            raw_ids = await self.ledger.call(self.shipping_routes_address, "getActiveRoutes")
            route_ids = [str(int(r)) for r in raw_ids or []]
        except (RemoteCallError, TypeError, ValueError) as e:
            logger.error(f"Error fetching active routes: {e}")
            return []

        routes: List[Route] = []
        for route_id in route_ids:
            try:
                routes.append(await self._fetch_route(route_id))
            except (PartialDecodeError, RemoteCallError) as e:
                logger.warning(f"Skipping route {route_id}: {e}")
        return routes

    async def get_route(self, route_id: Any) -> Optional[Route]:
        """Single route, or None when it cannot be fetched or decoded"""
        try:
            return await self._fetch_route(_route_id(route_id))
        except LedgerCoordinatorError as e:
            logger.error(f"Error fetching route {route_id}: {e}")
            return None

    async def get_assignable_campaigns(self) -> List[Campaign]:
        """Funded or Completed campaigns that no active route holds yet"""
        routes, campaigns = await asyncio.gather(
            self.list_active_routes(),
            self.campaigns.list_campaigns(),
        )
        return assignable_campaigns(routes, campaigns)

    async def get_hub_stats(self) -> HubStats:
        routes, campaigns = await asyncio.gather(
            self.list_active_routes(),
            self.campaigns.list_campaigns(),
        )
        return summarize_hub(campaigns, routes)

    # ====================
    # Lifecycle
    # ====================

    async def _check_unassigned(self, campaign_id: str) -> None:
        """Recompute the pool and reject campaigns that are not in it"""
        routes, campaign = await asyncio.gather(
            self.list_active_routes(),
            self.campaigns.get_campaign(campaign_id),
        )
        for route in routes:
            if campaign_id in route.assigned_campaign_ids:
                raise LedgerValidationError(
                    f"Campaign {campaign_id} is already assigned to route {route.id}",
                    field="campaign_id",
                )
        if campaign is None:
            raise LedgerValidationError(f"Campaign not found: {campaign_id}", field="campaign_id")
        if campaign.status not in ASSIGNABLE_STATUSES:
            raise LedgerValidationError(
                f"Campaign {campaign_id} is {campaign.status.name}; only funded or completed "
                f"campaigns can be assigned",
                field="campaign_id",
            )

    async def assign_campaign_to_route(
        self,
        session: SessionContext,
        campaign_id: Any,
        route_id: Any,
        container_count: Any,
        requires_refrigeration: Any = False,
        notes: str = "",
        enforce_unique: bool = True,
    ) -> LedgerResponse:
        """
        Link a campaign to a route.

        With enforce_unique the assignment pool is recomputed first and a
        campaign already held by an active route is rejected without a write.
        Another user's concurrent assignment is only seen on the next reload.
        """
        try:
            cid = require_id(campaign_id, "campaign_id")
            rid = _route_id(route_id)
            if isinstance(container_count, bool):
                raise ValueError(container_count)
            count = int(container_count)
            if count < 1:
                raise ValueError(container_count)
        except (TypeError, ValueError):
            return LedgerResponse.failed(
                LedgerValidationError("container_count must be a positive integer", field="container_count"),
                "Invalid assignment",
            )
        except LedgerValidationError as e:
            return LedgerResponse.failed(e, "Invalid assignment")

        try:
            refrigerated = as_bool(requires_refrigeration)
        except ValueError:
            return LedgerResponse.failed(
                LedgerValidationError("requires_refrigeration must be a boolean", field="requires_refrigeration"),
                "Invalid assignment",
            )

        if enforce_unique:
            try:
                await self._check_unassigned(cid)
            except LedgerValidationError as e:
                logger.warning(f"Assignment rejected: {e}")
                return LedgerResponse.failed(e, "Campaign cannot be assigned")

        return await self._write(
            session,
            "assignCampaignToRoute",
            [int(cid), int(rid), count, refrigerated, notes or ""],
            "Campaign assigned to route",
            "Failed to assign campaign",
            entity_id=rid,
        )

    async def update_route_status(
        self,
        session: SessionContext,
        route_id: Any,
        status: Any,
        location: str = "",
    ) -> LedgerResponse:
        try:
            rid = _route_id(route_id)
            new_status = _parse_status(status)
        except LedgerValidationError as e:
            return LedgerResponse.failed(e, "Invalid status update")

        return await self._write(
            session,
            "updateRouteStatus",
            [int(rid), int(new_status), location or ""],
            "Route status updated",
            "Failed to update route status",
            entity_id=rid,
        )

    async def mark_port_visited(self, session: SessionContext, route_id: Any, port_index: Any) -> LedgerResponse:
        """Mark one stop visited; the ledger leaves every other stop unchanged"""
        try:
            rid = _route_id(route_id)
            index = validate_port_index(None, port_index)
        except LedgerValidationError as e:
            return LedgerResponse.failed(e, "Invalid port update")

        return await self._write(
            session,
            "markPortVisited",
            [int(rid), index],
            "Port marked as visited",
            "Failed to mark port visited",
            entity_id=rid,
        )

    async def complete_route(self, session: SessionContext, route_id: Any) -> LedgerResponse:
        try:
            rid = _route_id(route_id)
        except LedgerValidationError as e:
            return LedgerResponse.failed(e, "Invalid route")

        return await self._write(
            session, "completeRoute", [int(rid)], "Route completed", "Failed to complete route", entity_id=rid
        )


__all__ = ["RouteService"]
