# =============================================================================
# core/registry.py  —  Static tool catalog + keyword search
# =============================================================================
#
# TOOLS is the single source of truth for tool names, descriptions and
# required parameters.  It feeds three consumers:
#
#   1. search_tools      →  keyword search below
#   2. the Dispatcher    →  name lookup + argument model
#   3. tools/mcp_server  →  @mcp.tool(name=..., description=...)
#
# A tool added in one place but not the others makes the protocol listing and
# the search results disagree; tests/test_mcp_server.py checks they match.
# Order is declaration order and search results keep it.
# =============================================================================

from typing import Type

from core.arguments import (
    AccountIdArgs,
    AccountListArgs,
    AccountTasksArgs,
    CreateNoteArgs,
    FindAccountByNameArgs,
    ListCustomTraitsArgs,
    NoteIdArgs,
    RefreshAccountsArgs,
    SearchAccountsArgs,
    SearchToolsArgs,
    SearchUsersArgs,
    ToolArguments,
    UpdateTraitsArgs,
)
from core.errors import NotFoundError, ValidationError
from core.models import ToolDescriptor

TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        "search_tools",
        "Vitally tool to search for available tools by keyword",
        ("keyword",),
    ),
    ToolDescriptor(
        "search_users",
        "Vitally tool to search for users by email or external ID",
    ),
    ToolDescriptor(
        "search_accounts",
        "Vitally tool to search for accounts by multiple criteria",
    ),
    ToolDescriptor(
        "get_account_health",
        "Vitally tool to get health scores for an account",
        ("accountId",),
    ),
    ToolDescriptor(
        "find_account_by_name",
        "Vitally tool to find an account by name (partial match supported)",
        ("name",),
    ),
    ToolDescriptor(
        "get_account_conversations",
        "Vitally tool to get recent conversations for an account",
        ("accountId",),
    ),
    ToolDescriptor(
        "get_account_tasks",
        "Vitally tool to get tasks for an account",
        ("accountId",),
    ),
    ToolDescriptor(
        "get_account_notes",
        "Vitally tool to retrieve notes for an account",
        ("accountId",),
    ),
    ToolDescriptor(
        "get_note_by_id",
        "Vitally tool to retrieve full content of a specific note by ID",
        ("noteId",),
    ),
    ToolDescriptor(
        "create_account_note",
        "Vitally tool to create a new note for an account",
        ("accountId", "content"),
    ),
    ToolDescriptor(
        "refresh_accounts",
        "Vitally tool to refresh the list of accounts",
    ),
    ToolDescriptor(
        "get_account_details",
        "Get full account details including traits, success metrics, health score, MRR, "
        "NPS score, timestamps, CSM assignment, and segments",
        ("accountId",),
    ),
    ToolDescriptor(
        "list_custom_traits",
        "List all custom trait definitions for a given object type "
        "(accounts, users, notes, tasks, projects, organizations)",
        ("model",),
    ),
    ToolDescriptor(
        "update_account_traits",
        "Update custom traits on a Vitally account. Traits are merged with existing values.",
        ("accountId", "traits"),
    ),
    ToolDescriptor(
        "get_account_nps",
        "Get NPS survey responses for a specific account, including scores and feedback",
        ("accountId",),
    ),
    ToolDescriptor(
        "get_account_projects",
        "Get projects (e.g., onboarding, implementation) for a specific account, "
        "including status, dates, and traits",
        ("accountId",),
    ),
)

ARGUMENT_MODELS: dict[str, Type[ToolArguments]] = {
    "search_tools": SearchToolsArgs,
    "search_users": SearchUsersArgs,
    "search_accounts": SearchAccountsArgs,
    "get_account_health": AccountIdArgs,
    "find_account_by_name": FindAccountByNameArgs,
    "get_account_conversations": AccountListArgs,
    "get_account_tasks": AccountTasksArgs,
    "get_account_notes": AccountListArgs,
    "get_note_by_id": NoteIdArgs,
    "create_account_note": CreateNoteArgs,
    "refresh_accounts": RefreshAccountsArgs,
    "get_account_details": AccountIdArgs,
    "list_custom_traits": ListCustomTraitsArgs,
    "update_account_traits": UpdateTraitsArgs,
    "get_account_nps": AccountListArgs,
    "get_account_projects": AccountListArgs,
}

_BY_NAME = {tool.name: tool for tool in TOOLS}


def get_tool(name: str) -> ToolDescriptor:
    try:
        return _BY_NAME[name]
    except KeyError:
        raise NotFoundError(f"Unknown tool: {name}") from None


def describe(name: str) -> str:
    """Description of a registered tool (used by the FastMCP decorators)."""
    return get_tool(name).description


def tool_names() -> list[str]:
    return [tool.name for tool in TOOLS]


def search_tools(keyword: str) -> list[ToolDescriptor]:
    """Case-insensitive substring search over tool names and descriptions.

    Raises:
        ValidationError: if keyword is empty.
    """
    if not keyword:
        raise ValidationError("Missing required argument: keyword", ("keyword",))
    needle = keyword.lower()
    return [
        tool for tool in TOOLS
        if needle in tool.name.lower() or needle in tool.description.lower()
    ]
