"""Solana JSON-RPC Client — balance reads and transaction lookup with endpoint fallback.

Invariants:
    - Endpoints tried in order; a transport error, non-2xx, non-object body or JSON-RPC
      error moves to the next
    - Balance reads degrade to 0 when every endpoint fails (display-only data)
    - get_transaction raises ExternalServiceError when every endpoint fails
      (a vote must never be accepted on an unverifiable payment)
    - EVM-style wallets (0x...) short-circuit to zero balance without any RPC call

Design Decisions:
    - Raw JSON-RPC over httpx instead of a Solana SDK: three read-only methods,
      no transaction building on the server
"""

import itertools
import logging

import httpx

from samu.core.domain_types import LAMPORTS_PER_SOL
from samu.core.errors import ExternalServiceError
from samu.core.token_transfer import extract_ui_balance

logger = logging.getLogger(__name__)


class RpcUnavailable(Exception):
    """Every configured endpoint failed for one call."""


def is_solana_wallet(wallet: str) -> bool:
    return bool(wallet) and not wallet.startswith("0x")


def _value(result) -> object:
    return result.get("value") if isinstance(result, dict) else None


class SolanaRpcClient:
    """Minimal async JSON-RPC client for the three calls the API needs."""

    def __init__(
        self,
        endpoints: list[str],
        samu_mint: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not endpoints:
            raise ValueError("at least one RPC endpoint is required")
        self.endpoints = endpoints
        self.samu_mint = samu_mint
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._ids = itertools.count(1)

    async def _call(self, method: str, params: list) -> dict | list | None:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        async with httpx.AsyncClient(
            timeout=self.timeout_seconds, transport=self._transport,
        ) as client:
            for attempt, endpoint in enumerate(self.endpoints, start=1):
                try:
                    response = await client.post(endpoint, json=payload)
                    response.raise_for_status()
                    data = response.json()
                except (httpx.HTTPError, ValueError) as e:
                    logger.warning(
                        f"RPC {method} failed on endpoint #{attempt}: {e}",
                        extra={"attempt": attempt, "service": "solana"},
                    )
                    continue
                if not isinstance(data, dict) or data.get("error"):
                    reason = data.get("error") if isinstance(data, dict) else "non-object body"
                    logger.warning(
                        f"RPC {method} error on endpoint #{attempt}: {reason}",
                        extra={"attempt": attempt, "service": "solana"},
                    )
                    continue
                return data.get("result")
        raise RpcUnavailable(method)

    async def get_samu_balance(self, wallet: str) -> float:
        if not is_solana_wallet(wallet):
            return 0.0
        try:
            result = await self._call(
                "getTokenAccountsByOwner",
                [wallet, {"mint": self.samu_mint}, {"encoding": "jsonParsed"}],
            )
        except RpcUnavailable:
            return 0.0
        return extract_ui_balance(_value(result) or [])

    async def get_sol_balance(self, wallet: str) -> float:
        if not is_solana_wallet(wallet):
            return 0.0
        try:
            result = await self._call("getBalance", [wallet])
        except RpcUnavailable:
            return 0.0
        return (_value(result) or 0) / LAMPORTS_PER_SOL

    async def get_transaction(self, signature: str) -> dict | None:
        try:
            return await self._call(
                "getTransaction",
                [
                    signature,
                    {
                        "encoding": "jsonParsed",
                        "commitment": "confirmed",
                        "maxSupportedTransactionVersion": 0,
                    },
                ],
            )
        except RpcUnavailable:
            raise ExternalServiceError(
                "solana", "all RPC endpoints failed", http_status=503,
            )
