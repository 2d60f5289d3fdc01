import pytest

from core.arguments import (
    AccountListArgs,
    CreateNoteArgs,
    ListCustomTraitsArgs,
    RefreshAccountsArgs,
    SearchAccountsArgs,
    SearchUsersArgs,
    UpdateTraitsArgs,
    decode_arguments,
)
from core.errors import ValidationError


def test_camel_case_aliases_and_defaults():
    args = decode_arguments(AccountListArgs, {"accountId": "42"})
    assert args.account_id == "42"
    assert args.limit == 10


def test_numeric_ids_become_strings():
    assert decode_arguments(AccountListArgs, {"accountId": 7}).account_id == "7"


def test_unknown_keys_are_ignored():
    args = decode_arguments(AccountListArgs, {"accountId": "1", "verbose": True})
    assert args.account_id == "1"


def test_missing_fields_are_all_named():
    with pytest.raises(ValidationError) as excinfo:
        decode_arguments(CreateNoteArgs, {})
    assert set(excinfo.value.fields) == {"accountId", "content"}
    assert str(excinfo.value).startswith("Missing required arguments: ")


def test_empty_string_counts_as_missing():
    with pytest.raises(ValidationError, match="Missing required argument: content"):
        decode_arguments(CreateNoteArgs, {"accountId": "1", "content": ""})


def test_limit_must_be_positive():
    with pytest.raises(ValidationError) as excinfo:
        decode_arguments(AccountListArgs, {"accountId": "1", "limit": 0})
    assert excinfo.value.fields == ("limit",)


def test_search_users_needs_a_criterion():
    with pytest.raises(ValidationError, match="At least one search parameter"):
        decode_arguments(SearchUsersArgs, {"email": ""})


def test_search_accounts_needs_a_criterion():
    with pytest.raises(ValidationError, match=r"\(name or externalId\)"):
        decode_arguments(SearchAccountsArgs, {"limit": 5})


def test_refresh_defaults_and_status_enum():
    args = decode_arguments(RefreshAccountsArgs, None)
    assert (args.limit, args.status) == (100, "active")
    with pytest.raises(ValidationError) as excinfo:
        decode_arguments(RefreshAccountsArgs, {"status": "trial"})
    assert excinfo.value.fields == ("status",)


@pytest.mark.parametrize("given, expected", [("accounts", "accounts"), ("user", "users"), ("organization", "organizations")])
def test_custom_trait_models_accept_singular(given, expected):
    assert decode_arguments(ListCustomTraitsArgs, {"model": given}).model == expected


def test_custom_trait_model_outside_enum():
    with pytest.raises(ValidationError):
        decode_arguments(ListCustomTraitsArgs, {"model": "invoices"})


def test_traits_accept_scalars_only():
    args = decode_arguments(
        UpdateTraitsArgs,
        {"accountId": "1", "traits": {"a": "x", "b": 2, "c": 1.5, "d": True, "e": None}},
    )
    assert args.traits == {"a": "x", "b": 2, "c": 1.5, "d": True, "e": None}

    with pytest.raises(ValidationError) as excinfo:
        decode_arguments(UpdateTraitsArgs, {"accountId": "1", "traits": {"a": [1, 2]}})
    assert all(field.startswith("traits") for field in excinfo.value.fields)


def test_empty_traits_map_is_rejected():
    with pytest.raises(ValidationError) as excinfo:
        decode_arguments(UpdateTraitsArgs, {"accountId": "1", "traits": {}})
    assert excinfo.value.fields == ("traits",)
