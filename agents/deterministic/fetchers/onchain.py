"""
On-chain fetcher (public JSON-RPC endpoints).

Only native balances are answered directly. Other metrics return a
block-height probe so the resolution agent can mark them undetermined.
"""

from __future__ import annotations

import itertools
from typing import Any, Optional

from core.http import HttpClient
from core.schemas import DeterministicSpec, FetchResult

from .base import Clock, fail, guarded_fetch, post_json

PUBLIC_RPCS: dict[str, str] = {
    "ethereum": "https://eth.llamarpc.com",
    "eth": "https://eth.llamarpc.com",
    "polygon": "https://polygon-rpc.com",
    "arbitrum": "https://arb1.arbitrum.io/rpc",
    "optimism": "https://mainnet.optimism.io",
    "base": "https://mainnet.base.org",
}

WEI_PER_ETH = 10**18


class OnchainQueryFetcher:
    """Serves ONCHAIN_QUERY."""

    provider_name = "onchain_rpc"

    def __init__(self, http: HttpClient, clock: Clock, *, rpcs: Optional[dict[str, str]] = None) -> None:
        self._http = http
        self._clock = clock
        self._rpcs = rpcs or PUBLIC_RPCS
        self._ids = itertools.count(1)

    def fetch(self, spec: DeterministicSpec) -> FetchResult:
        return guarded_fetch(self.provider_name, self._clock, lambda: self._fetch(spec))

    def _call(self, url: str, method: str, params: list[Any]) -> Any:
        body = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        reply = post_json(self._http, url, self.provider_name, body=body)
        if not isinstance(reply, dict):
            raise fail("Malformed JSON-RPC reply", self.provider_name)
        if reply.get("error"):
            error = reply["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise fail(f"RPC error: {message}", self.provider_name, method=method)
        return reply.get("result")

    def _fetch(self, spec: DeterministicSpec) -> dict[str, Any]:
        chain = str(spec.get("chain", "")).strip().lower()
        url = self._rpcs.get(chain)
        if url is None:
            raise fail(
                f"Unsupported chain: {chain}. Supported: {', '.join(sorted(self._rpcs))}",
                self.provider_name,
                chain=chain,
            )

        metric = str(spec.get("metric", "")).lower()
        address = spec.get("address") or spec.get("contract_address")

        if address and ("balance" in metric or "staked" in metric):
            result = self._call(url, "eth_getBalance", [address, "latest"])
            wei = int(str(result), 16)
            return {
                "chain": chain,
                "metric": metric,
                "address": address,
                "balance_wei": str(wei),
                "balance_eth": wei / WEI_PER_ETH,
                "value": wei / WEI_PER_ETH,
                "query_type": "balance",
            }

        result = self._call(url, "eth_blockNumber", [])
        return {
            "chain": chain,
            "metric": metric,
            "latest_block": int(str(result), 16),
            "query_type": "probe",
            "probe": True,
            "note": f"Metric '{metric}' requires an indexer; only the chain head was read",
        }
