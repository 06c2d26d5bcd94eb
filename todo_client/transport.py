from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from .errors import GENERIC_ERROR, NetworkFailure, RequestFailure

logger = logging.getLogger(__name__)


def error_message(r: httpx.Response, default: str = GENERIC_ERROR) -> str:
    try:
        data = r.json()
    except ValueError:
        return default
    detail = data.get("detail") if isinstance(data, dict) else None
    if isinstance(detail, str) and detail:
        return detail
    # FastAPI validation errors: [{"loc": [...], "msg": "...", ...}]
    if isinstance(detail, list):
        msgs = [str(d["msg"]) for d in detail if isinstance(d, dict) and d.get("msg")]
        if msgs:
            return "; ".join(msgs)
    return default


def handle_response(r: httpx.Response, default: str = GENERIC_ERROR) -> Any:
    if not r.is_success:
        raise RequestFailure(error_message(r, default), r.status_code)
    try:
        return r.json()
    except ValueError:
        raise RequestFailure(GENERIC_ERROR, r.status_code) from None


async def send(
    method: str,
    url: str,
    headers: dict[str, str],
    json: Optional[Any] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.Response:
    """Issue exactly one request; transport errors become NetworkFailure."""
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            return await client.request(method, url, headers=headers, json=json)
    except httpx.TransportError as e:
        logger.warning("%s %s failed: %r", method, url, e)
        raise NetworkFailure(str(e) or "Network error") from e
