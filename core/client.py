# =============================================================================
# core/client.py  —  Vitally API transport (live client + selection)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Defines the one interface every operation talks to:
#
#       transport.call(endpoint, method="GET", body=None) -> JSON value
#
#   and the two things that implement it:
#     - VitallyClient  →  authenticated HTTPS calls via httpx
#     - MockResponder  →  canned demo data (core/mock_data.py)
#
#   create_transport() picks one of them ONCE, at process start, based on
#   Settings.demo_mode.  The Dispatcher and the AccountCache never know
#   which one they got.
#
# DATA SOURCE TOGGLE:
#   Leave VITALLY_API_KEY unset (or at the placeholder value) to run in demo
#   mode.  Set a real key to talk to Vitally.
# =============================================================================

import logging
from typing import Any, Optional, Protocol

import httpx

from core.config import Settings
from core.errors import ApiError, UpstreamError

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "POST", "PUT")


class VitallyTransport(Protocol):
    """Anything that can answer a Vitally API call."""

    def call(self, endpoint: str, method: str = "GET", body: Optional[Any] = None) -> Any:
        ...


# =============================================================================
# LIVE PROVIDER: Vitally REST API
# =============================================================================
class VitallyClient:
    """Authenticated client for the Vitally REST API.

    One network round trip per call.  No retries, and no timeout beyond the
    httpx default.  Non-2xx statuses raise ApiError, and connection problems
    raise UpstreamError.

    Args:
        settings: Configuration carrying the base URL and API key.
        transport: Optional httpx transport (tests pass httpx.MockTransport).
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.BaseTransport] = None):
        self.settings = settings
        self._http = httpx.Client(
            base_url=settings.base_url,
            headers={
                "Authorization": settings.auth_header,
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    def call(self, endpoint: str, method: str = "GET", body: Optional[Any] = None) -> Any:
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported method: {method}")

        kwargs: dict[str, Any] = {}
        if body is not None and method in ("POST", "PUT"):
            kwargs["json"] = body

        try:
            response = self._http.request(method, endpoint, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Error calling Vitally API %s %s: %s", method, endpoint, exc)
            raise UpstreamError(f"API call failed: {exc}") from exc

        if not response.is_success:
            logger.error(
                "Vitally API %s %s returned %s %s",
                method, endpoint, response.status_code, response.reason_phrase,
            )
            raise ApiError(response.status_code, response.reason_phrase)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(f"API returned invalid JSON for {endpoint}") from exc

    def close(self) -> None:
        self._http.close()


# =============================================================================
# PUBLIC API: create_transport (selection)
# =============================================================================
def create_transport(settings: Settings) -> VitallyTransport:
    """Return the live client, or the mock responder when in demo mode."""
    if settings.demo_mode:
        # Imported here so the live path never loads the demo dataset.
        from core.mock_data import MockResponder

        logger.warning(
            "VITALLY_API_KEY is not set or is using the placeholder value; "
            "starting in DEMO MODE with mock data"
        )
        return MockResponder()

    logger.info("Using Vitally API at %s", settings.base_url)
    return VitallyClient(settings)
