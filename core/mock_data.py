# =============================================================================
# core/mock_data.py  —  Demo-mode stand-in for the Vitally REST API
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   MockResponder answers the exact same call(endpoint, method, body)
#   contract as core.client.VitallyClient, using a small seeded dataset.
#   It is selected automatically when no usable API key is configured.
#
# MATCHING:
#   Endpoints are split into path segments and query parameters, then routed
#   on (method, segments).  Query parameters that Vitally honours server-side
#   (limit, status, model, email filters) are honoured here too, so every
#   Dispatcher operation behaves the same way offline.
#
# STATE:
#   Each responder owns a private copy of the seed data.  Created notes and
#   trait updates are kept on that copy, so a create followed by a read sees
#   the new record.  Apart from "now" timestamps on created notes, a given
#   call always produces the same shape.
#
#   The responder never raises: unknown endpoints answer {}.
# =============================================================================

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import parse_qs, urlsplit

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Seed data
# -----------------------------------------------------------------------------
_MOCK_ACCOUNTS: list[dict[str, Any]] = [
    {"id": "1", "name": "Acme Corporation", "externalId": "acme-corp"},
    {"id": "2", "name": "Globex Industries", "externalId": "globex"},
    {"id": "3", "name": "Initech Technologies", "externalId": "initech"},
    {"id": "4", "name": "Umbrella Corporation", "externalId": "umbrella",
     "churnedAt": "2024-03-31T00:00:00Z"},
    {"id": "5", "name": "Stark Industries", "externalId": "stark"},
]

# Success metrics shared by every demo account.
_ACCOUNT_TEMPLATE: dict[str, Any] = {
    "healthScore": 8,
    "mrr": 5000,
    "npsScore": 45,
    "usersCount": 12,
    "lastSeenTimestamp": "2024-01-15T10:00:00Z",
    "nextRenewalDate": "2025-06-01T00:00:00Z",
    "csmId": "csm-1",
    "segments": [{"id": "seg-1", "name": "Enterprise"}],
}

_MOCK_TRAITS: dict[str, dict[str, Any]] = {
    "1": {"vitally.custom.plan": "enterprise", "vitally.custom.deploymentModel": "cloud"},
    "2": {"vitally.custom.plan": "growth", "vitally.custom.deploymentModel": "cloud"},
    "3": {"vitally.custom.plan": "starter", "vitally.custom.deploymentModel": "on-prem"},
    "4": {"vitally.custom.plan": "growth", "vitally.custom.deploymentModel": "hybrid"},
    "5": {"vitally.custom.plan": "enterprise", "vitally.custom.deploymentModel": "on-prem"},
}

_MOCK_USERS: list[dict[str, Any]] = [
    {"id": "101", "name": "John Doe", "email": "john@acme-corp.com", "externalId": "user-101", "accountId": "1"},
    {"id": "102", "name": "Jane Smith", "email": "jane@globex.com", "externalId": "user-102", "accountId": "2"},
    {"id": "103", "name": "Mike Johnson", "email": "mike@initech.com", "externalId": "user-103", "accountId": "3"},
]

_MOCK_HEALTH_COMPONENTS: list[dict[str, Any]] = [
    {"name": "Product Usage", "score": 90},
    {"name": "Support Tickets", "score": 75},
    {"name": "Billing Status", "score": 95},
]

_MOCK_CONVERSATIONS: list[dict[str, Any]] = [
    {"id": "c1", "subject": "Product Feedback", "createdAt": "2023-01-15T10:30:00Z", "updatedAt": "2023-01-16T15:45:00Z"},
    {"id": "c2", "subject": "Support Question", "createdAt": "2023-02-22T09:15:00Z", "updatedAt": "2023-02-23T11:30:00Z"},
]

_MOCK_TASKS: list[dict[str, Any]] = [
    {"id": "t1", "title": "Follow-up Call", "description": "Schedule follow-up for new feature",
     "status": "open", "createdAt": "2023-03-10T14:20:00Z", "updatedAt": "2023-03-10T14:20:00Z"},
    {"id": "t2", "title": "Renewal Discussion", "description": "Discuss upcoming renewal",
     "status": "completed", "createdAt": "2023-02-05T11:00:00Z", "updatedAt": "2023-02-28T16:45:00Z"},
]

_MOCK_NOTES: list[dict[str, Any]] = [
    {"id": "n1", "accountId": "1", "content": "Kickoff call with the Acme platform team. Rollout planned for Q2.",
     "createdAt": "2024-01-08T16:00:00Z", "updatedAt": "2024-01-08T16:00:00Z"},
    {"id": "n2", "accountId": "1", "content": "Champion asked about SSO; sent the setup guide.",
     "createdAt": "2024-01-20T09:45:00Z", "updatedAt": "2024-01-21T08:10:00Z"},
]

_MOCK_NPS: list[dict[str, Any]] = [
    {"id": "nps-1", "externalId": "nps-resp-1", "userId": "101", "score": 9,
     "feedback": "Great product!", "respondedAt": "2024-01-10T14:00:00Z"},
    {"id": "nps-2", "externalId": "nps-resp-2", "userId": "102", "score": 7,
     "feedback": "Good but could improve docs", "respondedAt": "2024-01-12T09:30:00Z"},
]

_MOCK_PROJECTS: list[dict[str, Any]] = [
    {"id": "p1", "name": "Enterprise Onboarding", "durationInDays": 30, "targetStartDate": "2024-01-01",
     "actualStartDate": "2024-01-05", "actualCompletionDate": None, "projectStatusId": "in-progress",
     "traits": {}},
]

_MOCK_CUSTOM_FIELDS: dict[str, list[dict[str, Any]]] = {
    "accounts": [
        {"label": "Plan", "type": "string", "path": "vitally.custom.plan", "createdAt": "2023-01-01T00:00:00Z"},
        {"label": "Deployment Model", "type": "string", "path": "vitally.custom.deploymentModel",
         "createdAt": "2023-01-01T00:00:00Z"},
        {"label": "Entitlement Level", "type": "string", "path": "vitally.custom.entitlementLevel",
         "createdAt": "2023-03-15T00:00:00Z"},
        {"label": "Product License", "type": "string", "path": "vitally.custom.productLicense",
         "createdAt": "2023-03-15T00:00:00Z"},
    ],
}


def _now_iso() -> str:
    """UTC timestamp in the millisecond ISO format Vitally returns."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def _parse_endpoint(endpoint: str) -> tuple[list[str], dict[str, str]]:
    parsed = urlsplit(endpoint)
    segments = [s for s in parsed.path.split("/") if s]
    query = {k: v[0] for k, v in parse_qs(parsed.query).items()}
    return segments, query


def _limit(query: dict[str, str], default: Optional[int] = None) -> Optional[int]:
    try:
        return int(query["limit"])
    except (KeyError, ValueError):
        return default


def _page(results: list[dict[str, Any]], limit: Optional[int]) -> dict[str, Any]:
    """Wrap results in Vitally's pagination envelope (single page only)."""
    if limit is not None:
        results = results[:limit]
    return {"results": results, "next": None}


class MockResponder:
    """In-memory Vitally API used in demo mode."""

    def __init__(self) -> None:
        self._accounts = copy.deepcopy(_MOCK_ACCOUNTS)
        self._traits = copy.deepcopy(_MOCK_TRAITS)
        self._notes = copy.deepcopy(_MOCK_NOTES)
        self._next_note = len(self._notes) + 1

    def call(self, endpoint: str, method: str = "GET", body: Optional[Any] = None) -> Any:
        method = method.upper()
        logger.debug("DEMO MODE: mock API call to %s [%s]", endpoint, method)
        segments, query = _parse_endpoint(endpoint)

        if segments[:1] != ["resources"]:
            return {}
        rest = segments[1:]

        if rest[:1] == ["accounts"]:
            return self._accounts_route(rest[1:], method, query, body)
        if rest == ["users", "search"]:
            return _page(self._search_users(query), _limit(query))
        if rest[:1] == ["notes"] and len(rest) == 2 and method == "GET":
            return self._find_note(rest[1])
        if rest == ["customFields"]:
            return copy.deepcopy(_MOCK_CUSTOM_FIELDS.get(query.get("model", ""), []))
        return {}

    # --- Accounts ------------------------------------------------------------

    def _accounts_route(self, rest: list[str], method: str, query: dict[str, str], body: Any) -> Any:
        if not rest:
            if method != "GET":
                return {}
            return _page(self._list_accounts(query.get("status")), _limit(query))

        account_id = rest[0]
        if len(rest) == 1:
            if method == "PUT":
                return self._update_account(account_id, body or {})
            return self._account_detail(account_id)

        leaf = rest[1]
        limit = _limit(query)
        if leaf == "healthScores":
            return {
                "overallHealth": 85,
                "components": copy.deepcopy(_MOCK_HEALTH_COMPONENTS),
                "accountId": account_id,
            }
        if leaf == "conversations":
            return _page(copy.deepcopy(_MOCK_CONVERSATIONS), limit)
        if leaf == "tasks":
            tasks = copy.deepcopy(_MOCK_TASKS)
            if query.get("status"):
                tasks = [t for t in tasks if t["status"] == query["status"]]
            return _page(tasks, limit)
        if leaf == "notes":
            if method == "POST":
                return self._create_note(account_id, body or {})
            notes = [self._note_view(n) for n in self._notes if n["accountId"] == account_id]
            return _page(notes, limit)
        if leaf == "npsResponses":
            return _page(copy.deepcopy(_MOCK_NPS), limit)
        if leaf == "projects":
            projects = copy.deepcopy(_MOCK_PROJECTS)
            for project in projects:
                project["accountId"] = account_id
            return _page(projects, limit)
        return {}

    def _list_accounts(self, status: Optional[str]) -> list[dict[str, Any]]:
        accounts = [self._account_detail(a["id"]) for a in self._accounts]
        if status == "churned":
            return [a for a in accounts if a.get("churnedAt")]
        if status == "active":
            return [a for a in accounts if not a.get("churnedAt")]
        # No status (the cache's lazy load) or activeOrChurned: everything.
        return accounts

    def _account_detail(self, account_id: str) -> dict[str, Any]:
        account = next((a for a in self._accounts if a["id"] == account_id), None)
        if account is None:
            return {}
        detail = copy.deepcopy(_ACCOUNT_TEMPLATE)
        detail.update(copy.deepcopy(account))
        detail["traits"] = dict(self._traits.get(account_id, {}))
        return detail

    def _update_account(self, account_id: str, body: dict[str, Any]) -> dict[str, Any]:
        if not any(a["id"] == account_id for a in self._accounts):
            return {}
        # Shallow merge: new keys win, untouched keys survive.
        merged = dict(self._traits.get(account_id, {}))
        merged.update(body.get("traits") or {})
        self._traits[account_id] = merged
        return self._account_detail(account_id)

    # --- Users ---------------------------------------------------------------

    def _search_users(self, query: dict[str, str]) -> list[dict[str, Any]]:
        users = copy.deepcopy(_MOCK_USERS)
        if query.get("email"):
            users = [u for u in users if u["email"].lower() == query["email"].lower()]
        if query.get("externalId"):
            users = [u for u in users if u["externalId"] == query["externalId"]]
        if query.get("emailSubdomain"):
            sub = query["emailSubdomain"].lower()
            users = [u for u in users if sub in u["email"].split("@", 1)[-1].lower()]
        return users

    # --- Notes ---------------------------------------------------------------

    def _note_view(self, note: dict[str, Any]) -> dict[str, Any]:
        view = {k: v for k, v in note.items() if k != "accountId"}
        account = next((a for a in self._accounts if a["id"] == note["accountId"]), None)
        view["account"] = {"id": note["accountId"], "name": account["name"] if account else None}
        return view

    def _find_note(self, note_id: str) -> dict[str, Any]:
        note = next((n for n in self._notes if n["id"] == note_id), None)
        return self._note_view(note) if note else {}

    def _create_note(self, account_id: str, body: dict[str, Any]) -> dict[str, Any]:
        now = _now_iso()
        note = {
            "id": f"n{self._next_note}",
            "accountId": account_id,
            "content": body.get("content"),
            "createdAt": now,
            "updatedAt": now,
        }
        self._next_note += 1
        self._notes.append(note)
        return self._note_view(note)
