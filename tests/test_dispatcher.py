import json

import pytest

from conftest import RecordingTransport
from core.dispatcher import Dispatcher
from core.errors import ApiError, NotFoundError, UpstreamError, ValidationError
from core.models import Account


# =============================================================================
# Demo scenarios
# =============================================================================
def test_find_acme(invoke_json):
    result = invoke_json("find_account_by_name", {"name": "acme"})
    assert result["count"] == 1
    account = result["accounts"][0]
    assert account["name"] == "Acme Corporation"
    assert account["uri"] == "vitally://account/1"


def test_account_health(invoke_json):
    health = invoke_json("get_account_health", {"accountId": "1"})
    assert health["overallHealth"] == 85
    assert [c["name"] for c in health["components"]] == ["Product Usage", "Support Tickets", "Billing Status"]


def test_update_traits_reports_merged_traits(invoke_json):
    result = invoke_json(
        "update_account_traits",
        {"accountId": "1", "traits": {"vitally.custom.plan": "enterprise", "vitally.custom.seats": 40}},
    )
    assert result["success"] is True
    assert result["account"] == {
        "id": "1",
        "name": "Acme Corporation",
        "traits": {
            "vitally.custom.plan": "enterprise",
            "vitally.custom.deploymentModel": "cloud",
            "vitally.custom.seats": 40,
        },
    }


def test_created_note_shows_up_in_account_notes(invoke_json):
    created = invoke_json("create_account_note", {"accountId": "2", "content": "QBR booked for May"})
    assert created["success"] is True
    assert set(created["note"]) == {"id", "content", "createdAt"}

    notes = invoke_json("get_account_notes", {"accountId": "2"})
    assert notes["count"] == 1
    assert notes["notes"][0]["id"] == created["note"]["id"]
    assert notes["notes"][0]["content"] == "QBR booked for May"

    full = invoke_json("get_note_by_id", {"noteId": created["note"]["id"]})
    assert full["account"] == {"id": "2", "name": "Globex Industries"}


def test_payload_is_two_space_indented_json(dispatcher):
    text = dispatcher.invoke("get_account_health", {"accountId": "1"})
    assert text.startswith('{\n  "overallHealth": 85')


# =============================================================================
# search_tools / search_users
# =============================================================================
def test_search_tools(invoke_json):
    result = invoke_json("search_tools", {"keyword": "Conversations"})
    assert [t["name"] for t in result["tools"]] == ["get_account_conversations"]
    assert result["count"] == 1
    assert result["tools"][0]["requiredParams"] == ["accountId"]

    nps = invoke_json("search_tools", {"keyword": "nps"})
    assert [t["name"] for t in nps["tools"]] == ["get_account_details", "get_account_nps"]


def test_search_tools_no_match_is_a_message(dispatcher):
    assert dispatcher.invoke("search_tools", {"keyword": "invoice"}) == 'No tools found matching "invoice"'


def test_search_users_passes_query_parameters(dispatcher, transport):
    result = json.loads(dispatcher.invoke("search_users", {"emailSubdomain": "globex"}))
    assert transport.endpoints() == ["/resources/users/search?emailSubdomain=globex"]
    assert result["users"] == [
        {"id": "102", "name": "Jane Smith", "email": "jane@globex.com", "externalId": "user-102"}
    ]


def test_search_users_no_match(dispatcher):
    assert dispatcher.invoke("search_users", {"externalId": "nobody"}) == "No users found matching the criteria"


# =============================================================================
# Account cache reads
# =============================================================================
def test_search_accounts_truncates_and_counts(invoke_json):
    result = invoke_json("search_accounts", {"name": "INDUSTRIES", "limit": 1})
    assert result["count"] == 1
    assert result["totalMatches"] == 2
    assert result["accounts"][0]["name"] == "Globex Industries"


def test_search_accounts_filters_are_anded(invoke_json):
    result = invoke_json("search_accounts", {"name": "industries", "externalId": "stark"})
    assert [a["id"] for a in result["accounts"]] == ["5"]


def test_search_accounts_external_id_is_exact(dispatcher):
    assert dispatcher.invoke("search_accounts", {"externalId": "STARK"}) == "No accounts found matching the criteria"


def test_find_account_without_match(dispatcher):
    assert dispatcher.invoke("find_account_by_name", {"name": "Hooli"}) == 'No accounts found matching "Hooli"'


def test_lazy_load_includes_churned_accounts(invoke_json):
    result = invoke_json("search_accounts", {"name": "umbrella"})
    assert [a["id"] for a in result["accounts"]] == ["4"]


def test_search_results_are_subset_of_cache(cache, dispatcher):
    cache.replace([
        Account(id="a", name="Blue Harbor"),
        Account(id="b", name="Harbor Freight"),
        Account(id="c", name="Red Rock"),
    ])
    result = json.loads(dispatcher.invoke("search_accounts", {"name": "harbor"}))
    assert [a["id"] for a in result["accounts"]] == ["a", "b"]
    assert result["totalMatches"] == 2


def test_cache_is_loaded_once(dispatcher, transport):
    dispatcher.invoke("find_account_by_name", {"name": "acme"})
    dispatcher.invoke("search_accounts", {"name": "globex"})
    dispatcher.list_resources()
    assert transport.endpoints().count("/resources/accounts") == 1


def test_refresh_replaces_a_populated_cache(cache, dispatcher, transport):
    cache.replace([Account(id="old", name="Legacy Account")])
    result = json.loads(dispatcher.invoke("refresh_accounts"))

    assert transport.endpoints() == ["/resources/accounts?limit=100&status=active"]
    assert result["count"] == 4
    assert "old" not in [a.id for a in cache.read_all()]
    assert result["accounts"][0]["traits"]["vitally.custom.plan"] == "enterprise"
    assert result["accounts"][0]["nextRenewalDate"] == "2025-06-01T00:00:00Z"


def test_refresh_with_status(dispatcher, cache):
    dispatcher.invoke("refresh_accounts", {"status": "activeOrChurned", "limit": 50})
    assert len(cache) == 5


def test_trait_update_leaves_cache_stale(dispatcher, cache):
    dispatcher.invoke("find_account_by_name", {"name": "acme"})
    dispatcher.invoke("update_account_traits", {"accountId": "1", "traits": {"vitally.custom.tier": "gold"}})
    acme = cache.read_all()[0]
    assert "vitally.custom.tier" not in acme.traits

    dispatcher.invoke("refresh_accounts")
    acme = cache.read_all()[0]
    assert acme.traits["vitally.custom.tier"] == "gold"


# =============================================================================
# Account sub-resources
# =============================================================================
def test_task_status_is_passed_upstream(dispatcher, transport):
    result = json.loads(dispatcher.invoke("get_account_tasks", {"accountId": "1", "status": "open"}))
    assert transport.endpoints() == ["/resources/accounts/1/tasks?limit=10&status=open"]
    assert [t["id"] for t in result["tasks"]] == ["t1"]


def test_limit_is_passed_upstream(invoke_json):
    result = invoke_json("get_account_conversations", {"accountId": "1", "limit": 1})
    assert result["count"] == 1
    assert set(result["conversations"][0]) == {"id", "subject", "createdAt", "updatedAt"}


def test_nps_projection(invoke_json):
    result = invoke_json("get_account_nps", {"accountId": "1"})
    assert result["count"] == 2
    assert result["responses"][0] == {
        "id": "nps-1",
        "userId": "101",
        "score": 9,
        "feedback": "Great product!",
        "respondedAt": "2024-01-10T14:00:00Z",
    }


def test_projects_projection(invoke_json):
    project = invoke_json("get_account_projects", {"accountId": "3"})["projects"][0]
    assert project["name"] == "Enterprise Onboarding"
    assert project["projectStatusId"] == "in-progress"
    assert "accountId" not in project


def test_account_details_are_unfiltered(invoke_json):
    details = invoke_json("get_account_details", {"accountId": "1"})
    assert details["csmId"] == "csm-1"
    assert details["segments"][0]["name"] == "Enterprise"
    assert details["traits"]["vitally.custom.deploymentModel"] == "cloud"


def test_account_details_unknown_account(dispatcher):
    with pytest.raises(NotFoundError, match="Account 404 not found"):
        dispatcher.invoke("get_account_details", {"accountId": "404"})


def test_list_custom_traits(invoke_json, transport):
    result = invoke_json("list_custom_traits", {"model": "account"})
    assert transport.endpoints() == ["/resources/customFields?model=accounts"]
    assert result["model"] == "accounts"
    assert result["count"] == 4
    assert result["traits"][0] == {
        "label": "Plan",
        "type": "string",
        "key": "vitally.custom.plan",
        "createdAt": "2023-01-01T00:00:00Z",
    }


# =============================================================================
# Validation happens before any network access
# =============================================================================
@pytest.mark.parametrize(
    "tool, arguments, field",
    [
        ("search_tools", {}, "keyword"),
        ("search_tools", {"keyword": ""}, "keyword"),
        ("find_account_by_name", {}, "name"),
        ("get_account_health", {}, "accountId"),
        ("get_account_conversations", {}, "accountId"),
        ("get_account_tasks", {"status": "open"}, "accountId"),
        ("get_account_notes", {}, "accountId"),
        ("get_account_nps", {}, "accountId"),
        ("get_account_projects", {}, "accountId"),
        ("get_account_details", {"accountId": ""}, "accountId"),
        ("get_note_by_id", {}, "noteId"),
        ("create_account_note", {"accountId": "1"}, "content"),
        ("list_custom_traits", {}, "model"),
        ("update_account_traits", {"accountId": "1"}, "traits"),
        ("refresh_accounts", {"status": "dormant"}, "status"),
    ],
)
def test_validation_names_field_and_skips_network(dispatcher, transport, tool, arguments, field):
    with pytest.raises(ValidationError) as excinfo:
        dispatcher.invoke(tool, arguments)
    assert field in excinfo.value.fields
    assert field in str(excinfo.value)
    assert transport.calls == []


@pytest.mark.parametrize("tool", ["search_users", "search_accounts"])
def test_search_without_criteria(dispatcher, transport, tool):
    with pytest.raises(ValidationError, match="At least one search parameter"):
        dispatcher.invoke(tool, {})
    assert transport.calls == []


def test_unknown_tool(dispatcher, transport):
    with pytest.raises(NotFoundError, match="Unknown tool"):
        dispatcher.invoke("delete_account", {"accountId": "1"})
    assert transport.calls == []


# =============================================================================
# Upstream failures
# =============================================================================
def test_api_error_keeps_type_and_gains_context():
    dispatcher = Dispatcher(RecordingTransport(error=ApiError(500, "Internal Server Error")))
    with pytest.raises(ApiError) as excinfo:
        dispatcher.invoke("get_account_tasks", {"accountId": "1"})
    assert excinfo.value.status_code == 500
    assert str(excinfo.value) == "Failed to get account tasks: API call failed: 500 Internal Server Error"


def test_failed_refresh_keeps_previous_cache(cache):
    cache.replace([Account(id="1", name="Acme Corporation")])
    dispatcher = Dispatcher(RecordingTransport(error=UpstreamError("API call failed: connection refused")), cache)
    with pytest.raises(UpstreamError, match="Failed to refresh accounts"):
        dispatcher.invoke("refresh_accounts")
    assert [a.name for a in cache.read_all()] == ["Acme Corporation"]


def test_no_cache_fallback_on_failed_load():
    dispatcher = Dispatcher(RecordingTransport(error=ApiError(401, "Unauthorized")))
    with pytest.raises(ApiError, match="Failed to load accounts: API call failed: 401 Unauthorized"):
        dispatcher.invoke("find_account_by_name", {"name": "acme"})
    assert dispatcher.cache.is_empty()
