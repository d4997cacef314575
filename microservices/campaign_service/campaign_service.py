"""
Campaign Service Business Logic

Campaign Coordinator: decodes group-purchasing records into typed campaigns,
sequences approve-then-join writes against a ledger with no multi-call
transactions, and computes derived prices.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from core.ledger_codec import (
    MAX_UINT256,
    UNLIMITED_ALLOWANCE_THRESHOLD,
    from_fixed,
    require_id,
    to_epoch,
    to_fixed,
)
from core.ledger_session import SessionContext
from core.ledger_types import (
    ApprovalError,
    FeePolicy,
    LedgerCoordinatorError,
    LedgerResponse,
    LedgerValidationError,
    PartialDecodeError,
    RemoteCallError,
    TransactionReceipt,
)

from .decoding import build_campaign, decode_campaign_fields, decode_container_requirements
from .models import (
    Campaign,
    CampaignType,
    ContainerCampaign,
    ContainerCampaignCreateRequest,
    ContainerRequirements,
    JoinQuote,
    ProductCampaign,
    ProductCampaignCreateRequest,
    campaigns_created_by,
)
from .pricing import container_payment, container_price_per_kg, product_cost
from .protocols import LedgerClientProtocol

logger = logging.getLogger(__name__)


def _validation_error(exc: ValidationError) -> LedgerValidationError:
    """Collapse a pydantic error into the coordinator's validation error"""
    first = exc.errors()[0]
    field = ".".join(str(p) for p in first.get("loc", ())) or None
    return LedgerValidationError(f"{field}: {first.get('msg')}" if field else first.get("msg"), field=field)


def _require_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise LedgerValidationError(f"{field} is required", field=field)
    return value.strip()


def _require_positive_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise LedgerValidationError(f"{field} must be a positive integer", field=field)
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise LedgerValidationError(f"{field} must be a positive integer", field=field)
    if number < 1 or (isinstance(value, float) and number != value):
        raise LedgerValidationError(f"{field} must be a positive integer", field=field)
    return number


class CampaignService:
    """Campaign coordinator over the group-purchasing and token contracts"""

    def __init__(
        self,
        ledger: LedgerClientProtocol,
        group_purchasing_address: str,
        token_address: str,
        fee_policy: FeePolicy,
        confirmation_timeout: Optional[float] = None,
    ):
        self.ledger = ledger
        self.group_purchasing_address = group_purchasing_address
        self.token_address = token_address
        self.fee_policy = fee_policy
        self.confirmation_timeout = confirmation_timeout

    # ====================
    # Writes
    # ====================

    async def _submit(
        self,
        session: SessionContext,
        contract: str,
        function: str,
        args: Sequence[Any],
    ) -> TransactionReceipt:
        """Submit one write and wait for its confirmation"""
        tx_hash = await self.ledger.send(contract, function, list(args), session.signer, self.fee_policy)
        logger.info(f"{function} submitted by {session.account}: {tx_hash}")
        return await self.ledger.wait_for_receipt(tx_hash, timeout=self.confirmation_timeout)

    # ====================
    # Approval
    # ====================

    async def check_approval(self, session: SessionContext) -> bool:
        """
        True iff the active account's allowance for the group-purchasing
        contract is effectively unlimited (>= half of the max uint256).
        """
        if session.approval_cache.get(session.account):
            return True
        try:
            raw = await self.ledger.call(
                self.token_address, "allowance", session.account, self.group_purchasing_address
            )
            approved = int(raw) >= UNLIMITED_ALLOWANCE_THRESHOLD
        except (RemoteCallError, TypeError, ValueError) as e:
            logger.error(f"Error checking approval for {session.account}: {e}")
            return False
        session.approval_cache.record(session.account, approved)
        return approved

    async def approve_if_needed(self, session: SessionContext) -> LedgerResponse:
        """
        Grant an unlimited allowance unless one is already in place.

        Idempotent: once approved, further calls issue no writes.
        """
        async with session.approval_cache.lock:
            if await self.check_approval(session):
                logger.info(f"Already has unlimited approval, skipping: {session.account}")
                return LedgerResponse.ok("Already approved", already_approved=True)

            try:
                logger.info(f"Requesting unlimited token approval for {session.account}")
                receipt = await self._submit(
                    session,
                    self.token_address,
                    "approve",
                    [self.group_purchasing_address, MAX_UINT256],
                )
            except RemoteCallError as e:
                logger.error(f"Approval error for {session.account}: {e}")
                return LedgerResponse.failed(ApprovalError(str(e)), "Failed to approve token spending")

            session.approval_cache.record(session.account, True)
            return LedgerResponse.ok(
                "Unlimited approval granted",
                already_approved=False,
                tx_hash=receipt.tx_hash,
            )

    # ====================
    # Creation
    # ====================

    async def _read_created_id(self) -> Optional[str]:
        """The counter points one past the last created campaign"""
        try:
            counter = int(await self.ledger.call(self.group_purchasing_address, "campaignCounter"))
        except (RemoteCallError, TypeError, ValueError) as e:
            logger.error(f"Campaign created but counter read failed: {e}")
            return None
        return str(counter - 1)

    async def _create(
        self, session: SessionContext, function: str, args: List[Any], name: str
    ) -> LedgerResponse:
        try:
            receipt = await self._submit(session, self.group_purchasing_address, function, args)
        except RemoteCallError as e:
            logger.error(f"Create campaign error ({function}): {e}")
            return LedgerResponse.failed(e, "Failed to create campaign")

        campaign_id = await self._read_created_id()
        if campaign_id is None:
            return LedgerResponse.ok(
                "Campaign created; id could not be read back",
                tx_hash=receipt.tx_hash,
            )
        logger.info(f"Campaign created: {campaign_id} ({name})")
        return LedgerResponse.ok(
            "Campaign created successfully",
            tx_hash=receipt.tx_hash,
            entity_id=campaign_id,
        )

    async def create_product_campaign(
        self,
        session: SessionContext,
        request: Union[ProductCampaignCreateRequest, Dict[str, Any]],
    ) -> LedgerResponse:
        """Create a single-product group purchase"""
        try:
            if not isinstance(request, ProductCampaignCreateRequest):
                request = ProductCampaignCreateRequest.model_validate(request)
            args = [
                request.name,
                request.description,
                request.min_quantity,
                to_fixed(request.price_per_unit, field="price_per_unit"),
                request.unit,
                to_fixed(request.target_amount, field="target_amount"),
                to_epoch(request.deadline, field="deadline"),
            ]
        except ValidationError as e:
            return LedgerResponse.failed(_validation_error(e), "Invalid product campaign")
        except LedgerValidationError as e:
            return LedgerResponse.failed(e, "Invalid product campaign")

        return await self._create(session, "createSingleProductCampaign", args, request.name)

    async def create_container_campaign(
        self,
        session: SessionContext,
        request: Union[ContainerCampaignCreateRequest, Dict[str, Any]],
    ) -> LedgerResponse:
        """Create a shared-container campaign"""
        try:
            if not isinstance(request, ContainerCampaignCreateRequest):
                request = ContainerCampaignCreateRequest.model_validate(request)
            requirements = [
                int(request.container_type),
                request.min_temp_celsius,
                request.max_temp_celsius,
                request.max_weight_kg,
                0,
                request.requires_ventilation,
                request.requires_refrigeration,
            ]
            args = [
                request.name,
                request.description,
                int(request.direction),
                request.origin_port,
                request.destination_port,
                requirements,
                to_fixed(request.target_amount, field="target_amount"),
                to_epoch(request.deadline, field="deadline"),
            ]
        except ValidationError as e:
            return LedgerResponse.failed(_validation_error(e), "Invalid container campaign")
        except LedgerValidationError as e:
            return LedgerResponse.failed(e, "Invalid container campaign")

        return await self._create(session, "createContainerCampaign", args, request.name)

    # ====================
    # Reads
    # ====================

    async def _fetch_requirements(self, campaign_id: str) -> ContainerRequirements:
        raw = await self.ledger.call(
            self.group_purchasing_address, "getContainerRequirements", int(campaign_id)
        )
        return decode_container_requirements(raw, campaign_id)

    async def _fetch_campaign(self, campaign_id: str) -> Campaign:
        raw = await self.ledger.call(self.group_purchasing_address, "getCampaign", int(campaign_id))
        fields = decode_campaign_fields(raw, campaign_id)
        requirements = None
        if fields["campaign_type"] == CampaignType.CONTAINER:
            requirements = await self._fetch_requirements(campaign_id)
        return build_campaign(campaign_id, fields, requirements)

    async def list_campaigns(self) -> List[Campaign]:
        """
        Every decodable campaign, in id order 1..counter-1.

        A record that fails to fetch or decode is skipped; the listing never
        fails because of one bad item.
        """
        try:
            counter = int(await self.ledger.call(self.group_purchasing_address, "campaignCounter"))
        except (RemoteCallError, TypeError, ValueError) as e:
            logger.error(f"Error fetching campaigns: {e}")
            return []

        campaigns: List[Campaign] = []
        for i in range(1, counter):
            campaign_id = str(i)
            try:
                campaigns.append(await self._fetch_campaign(campaign_id))
            except (PartialDecodeError, RemoteCallError) as e:
                logger.warning(f"Skipping campaign {campaign_id}: {e}")
        return campaigns

    async def get_campaign(self, campaign_id: Any) -> Optional[Campaign]:
        """Single campaign, or None when it cannot be fetched or decoded"""
        try:
            return await self._fetch_campaign(require_id(campaign_id, "campaign_id"))
        except LedgerCoordinatorError as e:
            logger.error(f"Error fetching campaign {campaign_id}: {e}")
            return None

    async def get_container_requirements(self, campaign_id: Any) -> Optional[ContainerRequirements]:
        """Container requirements of a campaign, or None"""
        try:
            return await self._fetch_requirements(require_id(campaign_id, "campaign_id"))
        except LedgerCoordinatorError as e:
            logger.error(f"Error fetching container requirements {campaign_id}: {e}")
            return None

    async def list_campaigns_by_creator(self, address: str) -> List[Campaign]:
        return campaigns_created_by(await self.list_campaigns(), address)

    # ====================
    # Quotes
    # ====================

    async def quote_container_join(self, campaign_id: Any, weight_kg: Any) -> Optional[JoinQuote]:
        """Price-per-kg and payment for a weight, from the campaign's current records"""
        campaign = await self.get_campaign(campaign_id)
        if not isinstance(campaign, ContainerCampaign):
            return None
        try:
            weight = _require_positive_int(weight_kg, "weight_kg")
            return JoinQuote(
                campaign_id=campaign.id,
                price_per_kg=container_price_per_kg(
                    campaign.target_amount, campaign.requirements.max_weight_kg
                ),
                payment=container_payment(
                    weight, campaign.target_amount, campaign.requirements.max_weight_kg
                ),
                weight_kg=weight,
            )
        except LedgerValidationError as e:
            logger.warning(f"Cannot quote campaign {campaign_id}: {e}")
            return None

    async def quote_product_join(self, campaign_id: Any, quantity: Any) -> Optional[JoinQuote]:
        """Cost of `quantity` units at the campaign's current unit price"""
        campaign = await self.get_campaign(campaign_id)
        if not isinstance(campaign, ProductCampaign):
            return None
        try:
            units = _require_positive_int(quantity, "quantity")
            return JoinQuote(
                campaign_id=campaign.id,
                payment=product_cost(units, campaign.price_per_unit),
                quantity=units,
            )
        except LedgerValidationError as e:
            logger.warning(f"Cannot quote campaign {campaign_id}: {e}")
            return None

    # ====================
    # Joins (approve, then act)
    # ====================

    async def _observed_balance(self, session: SessionContext) -> Optional[str]:
        if session.balance_provider is None:
            return None
        try:
            return str(await session.balance_provider.get_balance(session.account))
        except Exception as e:
            logger.warning(f"Balance query failed for {session.account}: {e}")
            return None

    async def _join(
        self,
        session: SessionContext,
        function: str,
        args: List[Any],
        data: Dict[str, Any],
    ) -> LedgerResponse:
        approval = await self.approve_if_needed(session)
        if not approval.success:
            return LedgerResponse(
                success=False,
                message="Failed to approve token spending",
                error=approval.error,
                error_kind=approval.error_kind,
                data=data,
            )

        balance = await self._observed_balance(session)
        if balance is not None:
            data["balance"] = balance

        try:
            receipt = await self._submit(session, self.group_purchasing_address, function, args)
        except RemoteCallError as e:
            logger.error(f"Join campaign error ({function}): {e}")
            response = LedgerResponse.failed(e, "Failed to join campaign")
            response.already_approved = approval.already_approved
            response.data = data
            return response

        return LedgerResponse.ok(
            "Joined campaign successfully",
            tx_hash=receipt.tx_hash,
            entity_id=str(args[0]),
            already_approved=approval.already_approved,
            data=data,
        )

    async def join_product_campaign(
        self,
        session: SessionContext,
        campaign_id: Any,
        quantity: Any,
        shipping_address: str,
        price_per_unit: Any,
    ) -> LedgerResponse:
        """Buy `quantity` units; the payment is quantity x price_per_unit"""
        try:
            cid = require_id(campaign_id, "campaign_id")
            units = _require_positive_int(quantity, "quantity")
            address = _require_text(shipping_address, "shipping_address")
            payment = product_cost(units, price_per_unit)
            to_fixed(payment, field="payment")
        except LedgerValidationError as e:
            return LedgerResponse.failed(e, "Invalid join request")

        logger.info(f"Joining product campaign {cid}: {units} units, payment {payment}")
        return await self._join(
            session,
            "joinSingleProductCampaign",
            [int(cid), units, address],
            {"payment": str(payment), "quantity": units},
        )

    async def join_container_campaign(
        self,
        session: SessionContext,
        campaign_id: Any,
        payment_amount: Any,
        weight_kg: Any,
        shipping_address: str,
    ) -> LedgerResponse:
        """Reserve `weight_kg` of container capacity for a pre-computed payment"""
        try:
            cid = require_id(campaign_id, "campaign_id")
            weight = _require_positive_int(weight_kg, "weight_kg")
            address = _require_text(shipping_address, "shipping_address")
            payment_fixed = to_fixed(payment_amount, field="payment_amount")
            if payment_fixed <= 0:
                raise LedgerValidationError("payment_amount must be positive", field="payment_amount")
        except LedgerValidationError as e:
            return LedgerResponse.failed(e, "Invalid join request")

        logger.info(f"Joining container campaign {cid}: {weight} kg, payment {payment_amount}")
        return await self._join(
            session,
            "joinContainerCampaign",
            [int(cid), payment_fixed, weight, address],
            {"payment": str(from_fixed(payment_fixed)), "weight_kg": weight},
        )

    # ====================
    # Lifecycle
    # ====================

    async def cancel_campaign(self, session: SessionContext, campaign_id: Any) -> LedgerResponse:
        """Cancel an Active campaign; the ledger restricts this to the creator"""
        try:
            cid = require_id(campaign_id, "campaign_id")
        except LedgerValidationError as e:
            return LedgerResponse.failed(e, "Invalid cancel request")

        try:
            receipt = await self._submit(session, self.group_purchasing_address, "cancelCampaign", [int(cid)])
        except RemoteCallError as e:
            logger.error(f"Cancel campaign error ({cid}): {e}")
            return LedgerResponse.failed(e, "Failed to cancel campaign")

        logger.info(f"Campaign cancelled: {cid}")
        return LedgerResponse.ok("Campaign cancelled", tx_hash=receipt.tx_hash, entity_id=cid)


__all__ = ["CampaignService"]
