# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL Vitally tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes the Vitally customer-success API as MCP tools and resources.
#   Each tool is a thin wrapper: it forwards its arguments to the core
#   Dispatcher and returns the JSON text it produces.
#
# HOW IT WORKS (the flow):
#   1. The host assistant calls a tool by name (e.g. "find_account_by_name")
#   2. FastMCP routes the call to the decorated function below
#   3. The function hands the arguments to core.dispatcher.Dispatcher
#   4. The Dispatcher validates, calls Vitally (or the demo responder),
#      projects the result and returns indented JSON text
#   5. Any core.errors.VitallyError becomes a ToolError for the host
#
# TOOL NAMES AND DESCRIPTIONS:
#   Both come from core/registry.py so that search_tools and the protocol
#   tool listing always agree.  Parameters use Vitally's camelCase names.
#
# RUNNING THIS SERVER:
#     a) Standalone:        python -m tools.mcp_server
#     b) Console script:    vitally-mcp
#     c) From the reference assistant (agent/cs_agent.py) via stdio
# =============================================================================

import logging
import sys
from typing import Annotated, Any, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ResourceError, ToolError
from fastmcp.resources import FunctionResource
from fastmcp.server.middleware import Middleware, MiddlewareContext
from pydantic import Field

from core.arguments import ACCOUNT_STATUSES, CUSTOM_FIELD_MODELS, AccountStatus, CustomFieldModel
from core.client import create_transport
from core.config import Settings
from core.dispatcher import Dispatcher
from core.errors import VitallyError
from core.models import TraitValue
from core.registry import describe
from core.resources import RESOURCE_MIME_TYPE, account_uri, parse_resource_uri

# =============================================================================
# Logging Setup
# =============================================================================
# STDOUT carries the MCP message stream, so every log line goes to STDERR.
#
# ANSI colours:
#     - CYAN for incoming tool calls (name + arguments)
#     - YELLOW for intermediate status
#     - GREEN for responses
#     - RED for errors surfaced to the host
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_RESET = "\033[0m"

_RESPONSE_PREVIEW_CHARS = 300

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger("vitally.mcp")


def _log_request(tool_name: str, **params) -> None:
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, text: str) -> str:
    preview = " ".join(text.split())
    if len(preview) > _RESPONSE_PREVIEW_CHARS:
        preview = preview[:_RESPONSE_PREVIEW_CHARS] + "…"
    logger.info(f"{_GREEN}  ← {tool_name} response: {preview}{_RESET}")
    return text


def _log_error(tool_name: str, exc: Exception) -> None:
    logger.error(f"{_RED}  ✗ {tool_name} failed: {exc}{_RESET}")


# =============================================================================
# Server wiring
# =============================================================================
# load_dotenv() must run before Settings.from_env() reads os.environ.
# The dispatcher is module-level so tests can swap it for one with a fake
# transport (monkeypatch tools.mcp_server.dispatcher).
# =============================================================================
load_dotenv()

settings = Settings.from_env()
dispatcher = Dispatcher(create_transport(settings))

mcp = FastMCP("vitally-api")


def _invoke(tool_name: str, **arguments: Any) -> str:
    """Forward a tool call to the Dispatcher, dropping unset arguments."""
    arguments = {k: v for k, v in arguments.items() if v is not None}
    _log_request(tool_name, **arguments)
    try:
        text = dispatcher.invoke(tool_name, arguments)
    except VitallyError as exc:
        _log_error(tool_name, exc)
        raise ToolError(str(exc)) from exc
    return _log_response(tool_name, text)


# --- Shared parameter annotations -------------------------------------------
AccountId = Annotated[str, Field(description="Vitally account ID")]
Limit = Annotated[Optional[int], Field(description="Maximum number of results to return (default: 10)")]


# =============================================================================
# TOOL: search_tools
# =============================================================================
@mcp.tool(name="search_tools", description=describe("search_tools"))
def search_tools(
    keyword: Annotated[str, Field(description="Keyword to search for in tool names and descriptions")],
) -> str:
    return _invoke("search_tools", keyword=keyword)


# =============================================================================
# TOOLS: users & accounts
# =============================================================================
@mcp.tool(name="search_users", description=describe("search_users"))
def search_users(
    email: Annotated[Optional[str], Field(description="User email address")] = None,
    externalId: Annotated[Optional[str], Field(description="User external ID")] = None,  # noqa: N803
    emailSubdomain: Annotated[Optional[str], Field(description="Email subdomain to search for")] = None,  # noqa: N803
) -> str:
    """At least one of email, externalId or emailSubdomain must be given."""
    return _invoke("search_users", email=email, externalId=externalId, emailSubdomain=emailSubdomain)


@mcp.tool(name="search_accounts", description=describe("search_accounts"))
def search_accounts(
    name: Annotated[Optional[str], Field(description="Account name (partial match)")] = None,
    externalId: Annotated[Optional[str], Field(description="Account external ID (exact match)")] = None,  # noqa: N803
    limit: Limit = None,
) -> str:
    """Filters the cached account list; at least one of name/externalId is required."""
    return _invoke("search_accounts", name=name, externalId=externalId, limit=limit)


@mcp.tool(name="find_account_by_name", description=describe("find_account_by_name"))
def find_account_by_name(
    name: Annotated[str, Field(description="Account name to search for (case-insensitive, partial match)")],
) -> str:
    return _invoke("find_account_by_name", name=name)


@mcp.tool(name="refresh_accounts", description=describe("refresh_accounts"))
def refresh_accounts(
    limit: Annotated[Optional[int], Field(description="Maximum number of accounts to fetch (default: 100)")] = None,
    status: Annotated[
        Optional[AccountStatus],
        Field(description=f"Account status filter, one of {', '.join(ACCOUNT_STATUSES)} (default: active)"),
    ] = None,
) -> str:
    """Re-fetches accounts from Vitally and replaces the in-memory cache."""
    return _invoke("refresh_accounts", limit=limit, status=status)


@mcp.tool(name="get_account_details", description=describe("get_account_details"))
def get_account_details(accountId: AccountId) -> str:  # noqa: N803
    return _invoke("get_account_details", accountId=accountId)


@mcp.tool(name="get_account_health", description=describe("get_account_health"))
def get_account_health(accountId: AccountId) -> str:  # noqa: N803
    return _invoke("get_account_health", accountId=accountId)


@mcp.tool(name="update_account_traits", description=describe("update_account_traits"))
def update_account_traits(
    accountId: AccountId,  # noqa: N803
    traits: Annotated[
        dict[str, TraitValue],
        Field(description='Traits to set, keyed by trait path (e.g. {"vitally.custom.plan": "enterprise"})'),
    ],
) -> str:
    """Upstream merges the traits; the local account cache is left as is."""
    return _invoke("update_account_traits", accountId=accountId, traits=traits)


@mcp.tool(name="list_custom_traits", description=describe("list_custom_traits"))
def list_custom_traits(
    model: Annotated[CustomFieldModel, Field(description=f"Object type, one of {', '.join(CUSTOM_FIELD_MODELS)}")],
) -> str:
    return _invoke("list_custom_traits", model=model)


# =============================================================================
# TOOLS: account activity (single page, bounded by limit)
# =============================================================================
@mcp.tool(name="get_account_conversations", description=describe("get_account_conversations"))
def get_account_conversations(accountId: AccountId, limit: Limit = None) -> str:  # noqa: N803
    return _invoke("get_account_conversations", accountId=accountId, limit=limit)


@mcp.tool(name="get_account_tasks", description=describe("get_account_tasks"))
def get_account_tasks(
    accountId: AccountId,  # noqa: N803
    status: Annotated[Optional[str], Field(description="Filter by task status (e.g. open, completed)")] = None,
    limit: Limit = None,
) -> str:
    return _invoke("get_account_tasks", accountId=accountId, status=status, limit=limit)


@mcp.tool(name="get_account_notes", description=describe("get_account_notes"))
def get_account_notes(accountId: AccountId, limit: Limit = None) -> str:  # noqa: N803
    return _invoke("get_account_notes", accountId=accountId, limit=limit)


@mcp.tool(name="get_account_nps", description=describe("get_account_nps"))
def get_account_nps(accountId: AccountId, limit: Limit = None) -> str:  # noqa: N803
    return _invoke("get_account_nps", accountId=accountId, limit=limit)


@mcp.tool(name="get_account_projects", description=describe("get_account_projects"))
def get_account_projects(accountId: AccountId, limit: Limit = None) -> str:  # noqa: N803
    return _invoke("get_account_projects", accountId=accountId, limit=limit)


# =============================================================================
# TOOLS: notes
# =============================================================================
@mcp.tool(name="get_note_by_id", description=describe("get_note_by_id"))
def get_note_by_id(
    noteId: Annotated[str, Field(description="Vitally note ID")],  # noqa: N803
) -> str:
    return _invoke("get_note_by_id", noteId=noteId)


@mcp.tool(name="create_account_note", description=describe("create_account_note"))
def create_account_note(
    accountId: AccountId,  # noqa: N803
    content: Annotated[str, Field(description="Note content")],
) -> str:
    return _invoke("create_account_note", accountId=accountId, content=content)


# =============================================================================
# RESOURCES
# =============================================================================
# resources/list            →  one vitally://account/{id} per cached account
#                              (AccountResourceListing middleware below)
# vitally://account/{id}    →  live account detail (resource template)
#
# The account list changes with refresh_accounts, so account resources are
# not registered one by one.  The middleware appends them to every
# resources/list answer from the current cache, loading it on first use, and
# reads of any listed URI are served by the template.
# =============================================================================
def _read_account(account_id: str) -> str:
    _log_request("resources/read", account_id=account_id)
    try:
        content = dispatcher.read_resource(account_uri(account_id))
    except VitallyError as exc:
        _log_error("resources/read", exc)
        raise ResourceError(str(exc)) from exc
    return content["text"]


def _account_reader(account_id: str):
    def read() -> str:
        return _read_account(account_id)

    return read


def _account_resources() -> list[FunctionResource]:
    _log_request("resources/list")
    try:
        descriptors = dispatcher.list_resources()
    except VitallyError as exc:
        _log_error("resources/list", exc)
        raise ResourceError(str(exc)) from exc
    _log_status(f"{len(descriptors)} account resources")
    return [
        FunctionResource.from_function(
            fn=_account_reader(parse_resource_uri(d["uri"])[1]),
            uri=d["uri"],
            name=d["name"],
            description=d["description"],
            mime_type=d["mimeType"],
        )
        for d in descriptors
    ]


class AccountResourceListing(Middleware):
    """Lists every cached account as its own addressable resource."""

    async def on_list_resources(self, context: MiddlewareContext, call_next):
        listed = list(await call_next(context))
        return listed + _account_resources()


mcp.add_middleware(AccountResourceListing())


@mcp.resource("vitally://account/{account_id}", mime_type=RESOURCE_MIME_TYPE)
def read_account_resource(account_id: str) -> str:
    """Full Vitally account record, fetched live."""
    return _read_account(account_id)


# =============================================================================
# Server entry point
# =============================================================================
def main() -> None:
    if settings.demo_mode:
        _log_status("DEMO MODE: serving mock Vitally data")
    else:
        _log_status(f"Serving Vitally data from {settings.base_url}")
    mcp.run()


if __name__ == "__main__":
    main()
