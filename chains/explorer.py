"""
chains/explorer.py - Block explorer (Blockscout v2) REST client.

One request per address:
    GET {base}/v2/addresses/{address}/blocks-validated

A non-200 status, a transport failure or a malformed body raises
ExplorerError; get_validated_blocks() reports it as Err so the caller can
fall back to RPC sampling.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

import httpx

from core.exceptions import ExplorerError
from core.logging import get_logger
from core.result import Err, Ok, Result
from core.time import parse_timestamp

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExplorerBlock:
    """A block attributed to an address by the explorer."""
    height: Optional[int]
    timestamp: Optional[datetime]


def _parse_height(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value, 16) if value.lower().startswith("0x") else int(value)
        except ValueError:
            return None
    return None


def parse_blocks_body(body: Any) -> list[ExplorerBlock]:
    """
    Parse a blocks-validated response body.

    Raises:
        ValueError: If the body is not {"items": [...]}
    """
    if not isinstance(body, dict):
        raise ValueError(f"expected JSON object, got {type(body).__name__}")

    items = body.get("items")
    if not isinstance(items, list):
        raise ValueError("response has no 'items' list")

    blocks = []
    for item in items:
        if not isinstance(item, dict):
            continue
        blocks.append(
            ExplorerBlock(
                height=_parse_height(item.get("height")),
                timestamp=parse_timestamp(item.get("timestamp")),
            )
        )
    return blocks


class ExplorerClient:
    """Blocking client for the explorer's address API."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10,
        client: httpx.Client | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.timeout_seconds),
                headers={"Accept": "application/json"},
            )
        return self._client

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
        self._client = None

    def __enter__(self) -> "ExplorerClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def blocks_validated_url(self, address: str) -> str:
        return f"{self.base_url}/v2/addresses/{address}/blocks-validated"

    def fetch_validated_blocks(self, address: str) -> list[ExplorerBlock]:
        """
        Fetch blocks attributed to address.

        Raises:
            ExplorerError: On transport failure, non-200 status or malformed body
        """
        url = self.blocks_validated_url(address)

        try:
            resp = self._get_client().get(url)
        except httpx.HTTPError as e:
            raise ExplorerError(
                f"explorer request failed: {e}",
                details={"url": url},
            ) from e

        if resp.status_code != 200:
            raise ExplorerError(
                f"explorer returned HTTP {resp.status_code}",
                details={"url": url, "status": resp.status_code},
            )

        try:
            return parse_blocks_body(resp.json())
        except ValueError as e:
            raise ExplorerError(
                f"explorer body malformed: {e}",
                details={"url": url},
            ) from e

    def get_validated_blocks(self, address: str) -> Result[list[ExplorerBlock]]:
        """Best-effort fetch_validated_blocks()."""
        try:
            return Ok(self.fetch_validated_blocks(address))
        except ExplorerError as e:
            logger.debug(
                "Explorer lookup failed",
                extra={"context": {"address": address, "error": e.message, **e.details}},
            )
            return Err(e.message)
