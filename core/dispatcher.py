# =============================================================================
# core/dispatcher.py  —  Tool dispatch: name + arguments → JSON text
# =============================================================================
#
# HOW A CALL FLOWS:
#   1. Look up the tool name in the registry        (NotFoundError)
#   2. Decode the argument map into a typed record  (ValidationError)
#   3. Do exactly one data access: a cache read, a cache refresh, or a
#      single API call through the transport
#   4. Project the result into a bounded summary (core/models.py)
#   5. Serialise it as indented JSON text
#
# Failures raise.  Nothing is retried, and an API failure never falls back
# to cached data.  Empty search results are NOT failures: they come back as
# a short human-readable message so the payload is never empty.
#
# The Dispatcher owns its AccountCache and only talks to the transport
# interface, so the live client and the demo responder are interchangeable.
# =============================================================================

import json
import logging
from typing import Any, Callable, Optional, Union
from urllib.parse import quote, urlencode

from core import arguments as a
from core.cache import AccountCache
from core.client import VitallyTransport
from core.errors import NotFoundError, UpstreamError
from core.models import (
    Account,
    Conversation,
    CustomFieldDefinition,
    Note,
    NpsResponse,
    Project,
    Task,
    User,
)
from core.registry import ARGUMENT_MODELS, get_tool, search_tools
from core.resources import RESOURCE_MIME_TYPE, account_resources, parse_resource_uri

logger = logging.getLogger(__name__)

Payload = Union[str, dict[str, Any], list[Any]]


def render(payload: Payload) -> str:
    """Serialise a tool result; plain messages pass through untouched."""
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _results(response: Any) -> list[dict[str, Any]]:
    """Items of a {results, next} page (`next` is never followed)."""
    if isinstance(response, dict):
        return list(response.get("results") or [])
    if isinstance(response, list):
        return response
    return []


def _with_query(path: str, **params: Any) -> str:
    query = urlencode({k: v for k, v in params.items() if v is not None})
    return f"{path}?{query}" if query else path


def _account_path(account_id: str, *leaf: str) -> str:
    return "/".join(["/resources/accounts", quote(account_id, safe=""), *leaf])


class Dispatcher:
    """Executes tool calls against a VitallyTransport and an AccountCache."""

    def __init__(self, transport: VitallyTransport, cache: Optional[AccountCache] = None):
        self.transport = transport
        self.cache = cache if cache is not None else AccountCache()
        self._handlers: dict[str, Callable[[Any], Payload]] = {
            "search_tools": self._search_tools,
            "search_users": self._search_users,
            "search_accounts": self._search_accounts,
            "get_account_health": self._get_account_health,
            "find_account_by_name": self._find_account_by_name,
            "get_account_conversations": self._get_account_conversations,
            "get_account_tasks": self._get_account_tasks,
            "get_account_notes": self._get_account_notes,
            "get_note_by_id": self._get_note_by_id,
            "create_account_note": self._create_account_note,
            "refresh_accounts": self._refresh_accounts,
            "get_account_details": self._get_account_details,
            "list_custom_traits": self._list_custom_traits,
            "update_account_traits": self._update_account_traits,
            "get_account_nps": self._get_account_nps,
            "get_account_projects": self._get_account_projects,
        }

    # =========================================================================
    # Entry point
    # =========================================================================
    def invoke(self, name: str, arguments: Optional[dict[str, Any]] = None) -> str:
        get_tool(name)
        args = a.decode_arguments(ARGUMENT_MODELS[name], arguments)
        return render(self._handlers[name](args))

    # =========================================================================
    # Upstream access
    # =========================================================================
    def _call(self, context: str, endpoint: str, method: str = "GET", body: Any = None) -> Any:
        try:
            return self.transport.call(endpoint, method, body)
        except UpstreamError as exc:
            # Keep the exception type (and ApiError.status_code) intact.
            exc.args = (f"{context}: {exc}",)
            raise

    def _load_accounts(self) -> list[Account]:
        response = self._call("Failed to load accounts", "/resources/accounts")
        return [Account.from_payload(item) for item in _results(response)]

    def _cached_accounts(self) -> list[Account]:
        return self.cache.ensure_loaded(self._load_accounts)

    # =========================================================================
    # Registry
    # =========================================================================
    def _search_tools(self, args: a.SearchToolsArgs) -> Payload:
        matches = search_tools(args.keyword)
        if not matches:
            return f'No tools found matching "{args.keyword}"'
        return {"count": len(matches), "tools": [tool.to_dict() for tool in matches]}

    # =========================================================================
    # Users & accounts
    # =========================================================================
    def _search_users(self, args: a.SearchUsersArgs) -> Payload:
        endpoint = _with_query(
            "/resources/users/search",
            email=args.email or None,
            externalId=args.external_id or None,
            emailSubdomain=args.email_subdomain or None,
        )
        users = [User.from_payload(u) for u in _results(self._call("User search failed", endpoint))]
        if not users:
            return "No users found matching the criteria"
        return {"count": len(users), "users": [u.summary() for u in users]}

    def _search_accounts(self, args: a.SearchAccountsArgs) -> Payload:
        matches = self._cached_accounts()
        if args.name:
            needle = args.name.lower()
            matches = [acc for acc in matches if needle in acc.name.lower()]
        if args.external_id:
            matches = [acc for acc in matches if acc.external_id == args.external_id]

        limited = matches[:args.limit]
        if not limited:
            return "No accounts found matching the criteria"
        return {
            "count": len(limited),
            "totalMatches": len(matches),
            "accounts": [acc.summary() for acc in limited],
        }

    def _find_account_by_name(self, args: a.FindAccountByNameArgs) -> Payload:
        needle = args.name.lower()
        matches = [acc for acc in self._cached_accounts() if needle in acc.name.lower()]
        if not matches:
            return f'No accounts found matching "{args.name}"'
        return {"count": len(matches), "accounts": [acc.summary() for acc in matches]}

    def _refresh_accounts(self, args: a.RefreshAccountsArgs) -> Payload:
        endpoint = _with_query("/resources/accounts", limit=args.limit, status=args.status)
        response = self._call("Failed to refresh accounts", endpoint)
        accounts = [Account.from_payload(item) for item in _results(response)]
        self.cache.replace(accounts)
        logger.info("Account cache replaced with %d accounts", len(accounts))
        return {"count": len(accounts), "accounts": [acc.success_summary() for acc in accounts]}

    def _get_account_details(self, args: a.AccountIdArgs) -> Payload:
        account = self._call("Failed to get account details", _account_path(args.account_id))
        if not account:
            raise NotFoundError(f"Account {args.account_id} not found")
        return account

    def _get_account_health(self, args: a.AccountIdArgs) -> Payload:
        return self._call(
            "Failed to get health scores",
            _account_path(args.account_id, "healthScores"),
        )

    def _update_account_traits(self, args: a.UpdateTraitsArgs) -> Payload:
        # The cache is not touched here: cached traits stay stale until the
        # next refresh_accounts.
        updated = self._call(
            "Failed to update account traits",
            _account_path(args.account_id),
            "PUT",
            {"traits": args.traits},
        )
        if not updated or not updated.get("id"):
            raise NotFoundError(f"Account {args.account_id} not found")
        return {
            "success": True,
            "account": {
                "id": updated.get("id"),
                "name": updated.get("name"),
                "traits": updated.get("traits"),
            },
        }

    def _list_custom_traits(self, args: a.ListCustomTraitsArgs) -> Payload:
        response = self._call(
            "Failed to list custom traits",
            _with_query("/resources/customFields", model=args.model),
        )
        fields = [CustomFieldDefinition.from_payload(f) for f in _results(response)]
        return {
            "model": args.model,
            "count": len(fields),
            "traits": [f.summary() for f in fields],
        }

    # =========================================================================
    # Account sub-resources (single page each)
    # =========================================================================
    def _account_page(self, context: str, args: a.AccountListArgs, leaf: str, **params: Any) -> list[dict]:
        endpoint = _with_query(_account_path(args.account_id, leaf), limit=args.limit, **params)
        return _results(self._call(context, endpoint))

    def _get_account_conversations(self, args: a.AccountListArgs) -> Payload:
        items = self._account_page("Failed to get account conversations", args, "conversations")
        conversations = [Conversation.from_payload(c).summary() for c in items]
        return {"count": len(conversations), "conversations": conversations}

    def _get_account_tasks(self, args: a.AccountTasksArgs) -> Payload:
        # The status filter is applied upstream, not here.
        items = self._account_page(
            "Failed to get account tasks", args, "tasks", status=args.status or None,
        )
        tasks = [Task.from_payload(t).summary() for t in items]
        return {"count": len(tasks), "tasks": tasks}

    def _get_account_notes(self, args: a.AccountListArgs) -> Payload:
        items = self._account_page("Failed to get account notes", args, "notes")
        notes = [Note.from_payload(n).summary() for n in items]
        return {"count": len(notes), "notes": notes}

    def _get_account_nps(self, args: a.AccountListArgs) -> Payload:
        items = self._account_page("Failed to get NPS responses", args, "npsResponses")
        responses = [NpsResponse.from_payload(r).summary() for r in items]
        return {"count": len(responses), "responses": responses}

    def _get_account_projects(self, args: a.AccountListArgs) -> Payload:
        items = self._account_page("Failed to get account projects", args, "projects")
        projects = [Project.from_payload(p).summary() for p in items]
        return {"count": len(projects), "projects": projects}

    # =========================================================================
    # Notes
    # =========================================================================
    def _get_note_by_id(self, args: a.NoteIdArgs) -> Payload:
        note = self._call("Failed to get note by ID", f"/resources/notes/{quote(args.note_id, safe='')}")
        if not note:
            raise NotFoundError(f"Note {args.note_id} not found")
        return note

    def _create_account_note(self, args: a.CreateNoteArgs) -> Payload:
        created = self._call(
            "Failed to create note",
            _account_path(args.account_id, "notes"),
            "POST",
            {"content": args.content},
        )
        if not created or created.get("id") is None:
            raise UpstreamError("Failed to create note: upstream returned no note")
        return {"success": True, "note": Note.from_payload(created).created_summary()}

    # =========================================================================
    # Resources
    # =========================================================================
    def list_resources(self) -> list[dict[str, Any]]:
        """One resource descriptor per cached account (loads the cache if empty)."""
        return account_resources(self._cached_accounts())

    def read_resource(self, uri: str) -> dict[str, Any]:
        """Resolve vitally://account/{id} to a live account-detail fetch."""
        _, account_id = parse_resource_uri(uri)
        account = self._call(
            f"Failed to retrieve account {account_id}",
            _account_path(account_id),
        )
        if not account:
            raise NotFoundError(f"Account {account_id} not found")
        return {"uri": uri, "mimeType": RESOURCE_MIME_TYPE, "text": render(account)}
