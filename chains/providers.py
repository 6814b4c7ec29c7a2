"""
chains/providers.py - JSON-RPC provider with endpoint failover.

Provides blocking RPC access with:
- Multiple endpoint failover
- Request timeout handling (transport-level only)
- Latency and error tracking per endpoint
- Ok/Err variants for best-effort callers
"""

import time
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from core.exceptions import RPCError
from core.logging import get_logger
from core.result import Err, Ok, Result

logger = get_logger(__name__)


@dataclass
class RPCStats:
    """Statistics for an RPC endpoint."""
    url: str
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    total_latency_ms: int = 0
    last_error: str | None = None
    last_success_ts: int | None = None

    @property
    def avg_latency_ms(self) -> int:
        if self.successful_requests == 0:
            return 0
        return self.total_latency_ms // self.successful_requests

    @property
    def success_rate(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.successful_requests / self.total_requests


@dataclass
class RPCResponse:
    """Response from an RPC call."""
    result: Any
    latency_ms: int
    endpoint_used: str


def _is_empty_result(result: Any) -> bool:
    return result is None or result == "0x" or result == ""


class RPCProvider:
    """
    RPC provider with failover support.

    Tries each endpoint in order until one succeeds. A single logical call
    never retries the same endpoint.
    """

    def __init__(
        self,
        rpc_urls: list[str],
        timeout_seconds: float = 10,
        client: httpx.Client | None = None,
    ):
        self.rpc_urls = [url for url in rpc_urls if url]
        self.timeout_seconds = timeout_seconds
        self._client = client
        self._owns_client = client is None
        self._request_id = 0

        self.stats: dict[str, RPCStats] = {
            url: RPCStats(url=url) for url in self.rpc_urls
        }

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.timeout_seconds),
                headers={"Content-Type": "application/json"},
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client if we created it."""
        if self._client is not None and self._owns_client:
            self._client.close()
        self._client = None

    def __enter__(self) -> "RPCProvider":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _next_request_id(self) -> int:
        self._request_id += 1
        return self._request_id

    def call(
        self,
        method: str,
        params: list | None = None,
    ) -> RPCResponse:
        """
        Make an RPC call with failover.

        Args:
            method: RPC method name
            params: Method parameters

        Returns:
            RPCResponse with result and metadata

        Raises:
            RPCError: If all endpoints fail
        """
        if not self.rpc_urls:
            raise RPCError("No RPC endpoints configured")

        client = self._get_client()
        last_error: str | None = None

        for url in self.rpc_urls:
            stats = self.stats[url]
            stats.total_requests += 1

            payload = {
                "jsonrpc": "2.0",
                "method": method,
                "params": params or [],
                "id": self._next_request_id(),
            }

            start_ms = int(time.time() * 1000)

            try:
                resp = client.post(url, json=payload)
                latency_ms = int(time.time() * 1000) - start_ms
                resp.raise_for_status()
                body = resp.json()

                if not isinstance(body, dict):
                    raise ValueError(f"unexpected body type {type(body).__name__}")

                if "error" in body:
                    error = body["error"]
                    error_msg = error.get("message", str(error)) if isinstance(error, dict) else str(error)
                    stats.failed_requests += 1
                    stats.last_error = error_msg
                    last_error = f"RPC error: {error_msg}"
                    logger.debug(
                        "RPC error response",
                        extra={"context": {"url": url, "method": method, "error": error_msg}},
                    )
                    continue

                stats.successful_requests += 1
                stats.total_latency_ms += latency_ms
                stats.last_success_ts = int(time.time() * 1000)

                return RPCResponse(
                    result=body.get("result"),
                    latency_ms=latency_ms,
                    endpoint_used=url,
                )

            except httpx.TimeoutException:
                latency_ms = int(time.time() * 1000) - start_ms
                stats.failed_requests += 1
                stats.last_error = f"Timeout after {latency_ms}ms"
                last_error = stats.last_error
                logger.debug(
                    "RPC timeout",
                    extra={"context": {"url": url, "method": method, "latency_ms": latency_ms}},
                )
                continue

            except (httpx.HTTPError, ValueError) as e:
                stats.failed_requests += 1
                stats.last_error = str(e)
                last_error = str(e)
                logger.debug(
                    "RPC request failed",
                    extra={"context": {"url": url, "method": method, "error": str(e)}},
                )
                continue

        raise RPCError(
            f"All RPC endpoints failed for {method}: {last_error}",
            details={
                "method": method,
                "endpoints_tried": len(self.rpc_urls),
                "last_error": last_error,
            },
        )

    def get_block_number(self) -> int:
        """Get latest block number."""
        response = self.call("eth_blockNumber")
        if _is_empty_result(response.result):
            raise RPCError("eth_blockNumber returned no data")
        try:
            return int(response.result, 16)
        except (TypeError, ValueError) as e:
            raise RPCError(
                f"Malformed block number: {response.result!r}",
                details={"result": response.result},
            ) from e

    def get_block_by_number(self, block_number: int) -> Optional[dict]:
        """
        Get a block header (without transactions).

        Returns:
            Block dict, or None if the node has no such block
        """
        response = self.call("eth_getBlockByNumber", [hex(block_number), False])
        if not isinstance(response.result, dict):
            return None
        return response.result

    def eth_call(
        self,
        to: str,
        data: str,
        block: str = "latest",
    ) -> Optional[str]:
        """
        Make eth_call.

        Args:
            to: Contract address
            data: Encoded call data (0x-prefixed)
            block: Block number or "latest"

        Returns:
            Hex result, or None when the call returned no data ("0x")
        """
        response = self.call("eth_call", [{"to": to, "data": data}, block])
        if _is_empty_result(response.result):
            return None
        return response.result

    def try_block_number(self) -> Result[int]:
        """Best-effort get_block_number()."""
        try:
            return Ok(self.get_block_number())
        except RPCError as e:
            return Err(e.message)

    def try_block_by_number(self, block_number: int) -> Result[Optional[dict]]:
        """Best-effort get_block_by_number()."""
        try:
            return Ok(self.get_block_by_number(block_number))
        except RPCError as e:
            return Err(e.message)

    def try_eth_call(self, to: str, data: str, block: str = "latest") -> Result[str]:
        """Best-effort eth_call(); an empty result is an Err."""
        try:
            result = self.eth_call(to, data, block)
        except RPCError as e:
            return Err(e.message)
        if result is None:
            return Err("empty result")
        return Ok(result)

    def get_stats_summary(self) -> dict:
        """Get statistics summary for all endpoints."""
        return {
            url: {
                "total_requests": s.total_requests,
                "success_rate": round(s.success_rate, 3),
                "avg_latency_ms": s.avg_latency_ms,
                "last_error": s.last_error,
            }
            for url, s in self.stats.items()
        }
