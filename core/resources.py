# =============================================================================
# core/resources.py  —  Browsable account resources (vitally://account/{id})
# =============================================================================
#
# One resource per cached account.  The URI names the object kind and its
# id; reading it resolves back to a live account-detail fetch (see
# Dispatcher.read_resource).  Only the "account" kind exists today.
# =============================================================================

from typing import Any, Iterable
from urllib.parse import urlsplit

from core.errors import NotFoundError
from core.models import ACCOUNT_URI_SCHEME, Account, account_uri

RESOURCE_MIME_TYPE = "application/json"
SUPPORTED_KINDS = ("account",)

__all__ = ["RESOURCE_MIME_TYPE", "account_resources", "account_uri", "parse_resource_uri"]


def account_resources(accounts: Iterable[Account]) -> list[dict[str, Any]]:
    return [
        {
            "uri": account_uri(account.id),
            "mimeType": RESOURCE_MIME_TYPE,
            "name": account.name,
            "description": f"Vitally customer account: {account.name}",
        }
        for account in accounts
    ]


def parse_resource_uri(uri: str) -> tuple[str, str]:
    """Split vitally://<kind>/<id> into (kind, id).

    Raises:
        NotFoundError: for foreign schemes, unsupported kinds or missing ids.
    """
    parsed = urlsplit(uri)
    if parsed.scheme != ACCOUNT_URI_SCHEME:
        raise NotFoundError(f"Resource URI '{uri}' not supported")

    # vitally://account/1 parses with netloc="account", path="/1".
    parts = [parsed.netloc] + [p for p in parsed.path.split("/") if p]
    kind = parts[0]
    if kind not in SUPPORTED_KINDS:
        raise NotFoundError(f"Resource type '{kind}' not supported")
    if len(parts) != 2:
        raise NotFoundError(f"Resource URI '{uri}' does not name a single {kind}")
    return kind, parts[1]
