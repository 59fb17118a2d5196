"""Pizza factory client: request fulfillment of a persisted order."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from app.schemas.order import FactoryFulfillment

if TYPE_CHECKING:
    from app.core.config import Settings

FACTORY_ORDER_PATH = "/api/order"


class FactoryError(Exception):
    """Raised when the factory rejects an order, cannot be reached, or replies without a token."""

    def __init__(
        self,
        message: str,
        report_url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message = message
        self.report_url = report_url
        self.status_code = status_code
        super().__init__(message)


def _json_body(resp: httpx.Response) -> dict[str, Any]:
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


async def request_fulfillment(
    diner: dict[str, Any],
    order: dict[str, Any],
    bearer_token: str,
    settings: Settings,
) -> FactoryFulfillment:
    """
    POST the order to the factory, forwarding the caller's bearer token.

    Returns the fulfillment token and report URL on a 2xx reply.
    Raises FactoryError on a non-2xx reply, a transport error, a timeout, or a
    reply without a token; report_url is set whenever the factory sent one.
    """
    url = f"{settings.FACTORY_URL.rstrip('/')}{FACTORY_ORDER_PATH}"
    timeout = max(1.0, min(120.0, settings.FACTORY_REQUEST_TIMEOUT_SEC))
    headers = {"Authorization": f"Bearer {bearer_token}"}
    payload = {"diner": diner, "order": order}

    try:
        async with httpx.AsyncClient() as client:
            resp = await client.post(url, json=payload, headers=headers, timeout=timeout)
    except httpx.TimeoutException as e:
        raise FactoryError("Pizza factory timed out.") from e
    except httpx.HTTPError as e:
        raise FactoryError(f"Pizza factory unreachable: {e!s}") from e

    body = _json_body(resp)
    report_url = body.get("reportUrl")
    if not 200 <= resp.status_code < 300:
        message = body.get("message") or f"Pizza factory returned {resp.status_code}"
        raise FactoryError(str(message)[:500], report_url, resp.status_code)
    token = body.get("jwt")
    if not token:
        raise FactoryError("Pizza factory response missing fulfillment token.", report_url)
    return FactoryFulfillment(jwt=token, report_url=report_url)
