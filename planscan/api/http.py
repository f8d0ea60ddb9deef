from typing import Any

import httpx

from planscan.api.exceptions import ApiProtocolError, ApiResponseError, ApiTransportError
from planscan.config.settings import Settings
from planscan.logging.logger import Log

TRANSPORT_ERROR_MESSAGE = "Could not reach the analysis service"


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    """Create the shared async HTTP client rooted at the configured API prefix."""
    return httpx.AsyncClient(
        base_url=settings.api_root,
        timeout=httpx.Timeout(settings.request_timeout_seconds),
    )


def transport_error(exc: httpx.TransportError) -> ApiTransportError:
    Log.error(f"Transport failure: {exc!r}")
    return ApiTransportError(TRANSPORT_ERROR_MESSAGE)


async def ensure_success(response: httpx.Response, fallback_message: str) -> None:
    """Raise ApiResponseError carrying the server 'detail' (or the fallback) on non-2xx."""
    if response.is_success:
        return
    await response.aread()
    detail = _extract_detail(response)
    Log.error(f"{response.request.method} {response.request.url} -> {response.status_code}")
    raise ApiResponseError(
        detail or fallback_message,
        status_code=response.status_code,
        detail=detail,
    )


def json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise ApiProtocolError(f"Invalid JSON response: {exc}") from exc


def _extract_detail(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    detail = body.get("detail")
    if not detail:
        return None
    return detail if isinstance(detail, str) else str(detail)
