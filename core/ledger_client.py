"""
Ledger Gateway Client

httpx adapter that executes named contract calls through the ledger gateway.
The gateway owns the contract schemas; this client only moves positional
argument lists and positional results across the wire.

Integers travel as decimal strings so arbitrary-precision values (allowances,
ids) survive JSON.
"""

import logging
from typing import Any, Dict, Optional, Sequence

import httpx
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_result,
    stop_after_delay,
    stop_never,
    wait_fixed,
)

from .config.ledger_config import LedgerConfig
from .ledger_protocols import SignerProtocol
from .ledger_types import FeePolicy, RemoteCallError, TransactionReceipt

logger = logging.getLogger(__name__)


def _encode_arg(value: Any) -> Any:
    """Encode one positional argument for the gateway"""
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_encode_arg(v) for v in value]
    return value


def _error_message(response: httpx.Response) -> str:
    """Pull the gateway's own message out of an error response"""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
        if body.get("detail"):
            return str(body["detail"])
    return response.text or f"HTTP {response.status_code}"


def _json_body(response: httpx.Response) -> Dict[str, Any]:
    """Decode a successful gateway reply, which must be a JSON object"""
    try:
        body = response.json()
    except ValueError:
        raise RemoteCallError(
            response.text or f"HTTP {response.status_code}", code=str(response.status_code)
        )
    if not isinstance(body, dict):
        raise RemoteCallError(
            f"Unexpected gateway reply: {response.text[:200]}", code=str(response.status_code)
        )
    return body


class GatewayLedgerClient:
    """
    Ledger client backed by the HTTP ledger gateway.

    Usage:
        async with GatewayLedgerClient.from_config(settings.ledger) as ledger:
            counter = await ledger.call(address, "campaignCounter")
    """

    def __init__(
        self,
        base_url: str,
        chain_id: int = 31337,
        timeout: float = 30.0,
        poll_interval: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.chain_id = chain_id
        self.poll_interval = poll_interval
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "User-Agent": "trade-hub-ledger-client",
            },
        )
        logger.debug(f"Initialized ledger gateway client: {self.base_url}")

    @classmethod
    def from_config(
        cls, config: LedgerConfig, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "GatewayLedgerClient":
        return cls(
            base_url=config.gateway_url,
            chain_id=config.chain_id,
            timeout=config.request_timeout,
            poll_interval=config.receipt_poll_interval,
            transport=transport,
        )

    async def close(self):
        await self.client.aclose()
        logger.debug("Closed ledger gateway client")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # ========================================
    # Transport
    # ========================================

    async def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self.client.post(path, json=body)
        except httpx.HTTPError as e:
            raise RemoteCallError(str(e) or type(e).__name__)
        if response.status_code >= 400:
            raise RemoteCallError(_error_message(response), code=str(response.status_code))
        payload = _json_body(response)
        if payload.get("error"):
            error = payload["error"]
            if isinstance(error, dict):
                raise RemoteCallError(
                    str(error.get("message", error)),
                    code=error.get("code"),
                    data=error.get("data"),
                )
            raise RemoteCallError(str(error))
        return payload

    # ========================================
    # Ledger primitives
    # ========================================

    async def call(self, contract: str, function: str, *args: Any) -> Any:
        """Execute a read-only named call and return its raw result"""
        payload = await self._post(
            "/api/v1/ledger/call",
            {
                "chain_id": self.chain_id,
                "contract": contract,
                "function": function,
                "args": [_encode_arg(a) for a in args],
            },
        )
        return payload.get("result")

    async def send(
        self,
        contract: str,
        function: str,
        args: Sequence[Any],
        signer: SignerProtocol,
        fee_policy: FeePolicy,
    ) -> str:
        """Sign and submit a write; returns the transaction hash"""
        tx = {
            "chain_id": self.chain_id,
            "from": signer.address,
            "contract": contract,
            "function": function,
            "args": [_encode_arg(a) for a in args],
            "overrides": fee_policy.as_overrides(),
        }
        try:
            signature = await signer.sign(tx)
        except Exception as e:
            # A rejected signature request is a failed round trip for the caller
            raise RemoteCallError(str(e) or "Signing rejected")

        payload = await self._post("/api/v1/ledger/send", {"transaction": tx, "signature": signature})
        tx_hash = payload.get("tx_hash")
        if not tx_hash:
            raise RemoteCallError(f"Gateway accepted {function} without a transaction hash")
        logger.info(f"Transaction sent: {function} {tx_hash}")
        return tx_hash

    async def _fetch_receipt(self, tx_hash: str) -> Optional[TransactionReceipt]:
        try:
            response = await self.client.get(f"/api/v1/ledger/receipts/{tx_hash}")
        except httpx.HTTPError as e:
            raise RemoteCallError(str(e) or type(e).__name__)
        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise RemoteCallError(_error_message(response), code=str(response.status_code))
        receipt = _json_body(response).get("receipt")
        if not receipt:
            return None
        if not isinstance(receipt, dict):
            raise RemoteCallError(f"Malformed receipt for {tx_hash}")
        return TransactionReceipt(
            tx_hash=receipt.get("tx_hash", tx_hash),
            block_number=receipt.get("block_number"),
            gas_used=receipt.get("gas_used"),
            succeeded=str(receipt.get("status", 1)) == "1",
            revert_reason=receipt.get("revert_reason"),
        )

    async def wait_for_receipt(
        self, tx_hash: str, timeout: Optional[float] = None
    ) -> TransactionReceipt:
        """
        Poll until the write is mined.

        Polling only re-reads the receipt; nothing is re-sent. A reverted
        write raises RemoteCallError with the ledger's revert reason.
        """
        retrying = AsyncRetrying(
            stop=stop_after_delay(timeout) if timeout else stop_never,
            wait=wait_fixed(self.poll_interval),
            retry=retry_if_result(lambda receipt: receipt is None),
        )
        try:
            receipt = await retrying(self._fetch_receipt, tx_hash)
        except RetryError:
            raise RemoteCallError(f"Timed out waiting for confirmation of {tx_hash}")

        if not receipt.succeeded:
            raise RemoteCallError(
                receipt.revert_reason or f"Transaction {tx_hash} reverted",
                data={"tx_hash": tx_hash},
            )
        logger.info(f"Transaction confirmed: {tx_hash} (block {receipt.block_number})")
        return receipt

    async def health_check(self) -> bool:
        try:
            response = await self.client.get("/health")
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"Ledger gateway health check failed: {e}")
            return False


__all__ = ["GatewayLedgerClient"]
