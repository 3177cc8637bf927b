from __future__ import annotations

import logging
from typing import Any

import anyio
import httpx

from duty_core.turn_order import ComputedTurnOrder, TurnOrderRequest

from .config import OrderProviderConfig

logger = logging.getLogger(__name__)

TURN_ORDER_PATH = "/turn-order"


class HttpTurnOrderProvider:
    """Turn-order provider backed by a remote ranking service.

    Retries timeouts, connection errors and 5xx responses with exponential
    backoff. Any other HTTP error, or the last failed attempt, propagates to
    the caller.
    """

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str = "",
        timeout_s: float = 30.0,
        retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
        backoff_s: float = 1.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout_s = timeout_s
        self.retries = max(1, retries)
        self.transport = transport
        self.backoff_s = backoff_s

    @classmethod
    def from_config(cls, cfg: OrderProviderConfig, **kwargs: Any) -> HttpTurnOrderProvider:
        return cls(base_url=cfg.base_url, api_key=cfg.api_key, timeout_s=cfg.timeout_s, retries=cfg.retries, **kwargs)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["X-Api-Key"] = self.api_key
        return headers

    async def _post(self, client: httpx.AsyncClient, body: dict[str, Any]) -> httpx.Response:
        url = f"{self.base_url}{TURN_ORDER_PATH}"
        last_exc: Exception | None = None
        for attempt in range(self.retries):
            try:
                resp = await client.post(url, json=body, headers=self._headers())
                if resp.status_code >= 500 and attempt < self.retries - 1:
                    logger.warning("turn order request failed with %s, retrying", resp.status_code)
                    await anyio.sleep(self.backoff_s * 2**attempt)
                    continue
                resp.raise_for_status()
                return resp
            except (httpx.TimeoutException, httpx.ConnectError) as exc:
                last_exc = exc
                if attempt < self.retries - 1:
                    logger.warning("turn order request error %r, retrying", exc)
                    await anyio.sleep(self.backoff_s * 2**attempt)
                    continue
                raise
        if last_exc:
            raise last_exc
        raise RuntimeError("request failed without an explicit exception")

    async def compute_turn_order(self, request: TurnOrderRequest) -> ComputedTurnOrder:
        async with httpx.AsyncClient(timeout=self.timeout_s, transport=self.transport) as client:
            resp = await self._post(client, request.to_payload())
        payload = resp.json()
        if not isinstance(payload, dict):
            raise ValueError("turn order response must be a JSON object")
        return ComputedTurnOrder.from_dict(payload)
