import json

import pytest

from core.errors import NotFoundError
from core.models import Account
from core.resources import account_resources, account_uri, parse_resource_uri


def test_account_uri_round_trip():
    assert account_uri("42") == "vitally://account/42"
    assert parse_resource_uri("vitally://account/42") == ("account", "42")


@pytest.mark.parametrize("uri, message", [
    ("https://account/1", "not supported"),
    ("vitally://user/1", "Resource type 'user' not supported"),
    ("vitally://account", "does not name a single account"),
    ("vitally://account/1/notes", "does not name a single account"),
])
def test_bad_uris(uri, message):
    with pytest.raises(NotFoundError, match=message):
        parse_resource_uri(uri)


def test_descriptors_carry_name_and_mime_type():
    [resource] = account_resources([Account(id="7", name="Wayne Enterprises")])
    assert resource == {
        "uri": "vitally://account/7",
        "mimeType": "application/json",
        "name": "Wayne Enterprises",
        "description": "Vitally customer account: Wayne Enterprises",
    }


def test_listing_loads_the_cache_once(dispatcher, transport, cache):
    first = dispatcher.list_resources()
    second = dispatcher.list_resources()
    assert first == second
    assert [r["name"] for r in first] == [
        "Acme Corporation",
        "Globex Industries",
        "Initech Technologies",
        "Umbrella Corporation",
        "Stark Industries",
    ]
    assert transport.endpoints() == ["/resources/accounts"]
    assert len(cache) == 5


def test_read_resource_fetches_live_detail(dispatcher, transport, cache):
    cache.replace([Account(id="1", name="Stale Name")])
    content = dispatcher.read_resource("vitally://account/1")
    assert content["uri"] == "vitally://account/1"
    assert content["mimeType"] == "application/json"
    assert json.loads(content["text"])["name"] == "Acme Corporation"
    assert transport.endpoints() == ["/resources/accounts/1"]


def test_read_resource_unknown_account(dispatcher):
    with pytest.raises(NotFoundError, match="Account 99 not found"):
        dispatcher.read_resource("vitally://account/99")


def test_read_resource_unsupported_kind_skips_network(dispatcher, transport):
    with pytest.raises(NotFoundError, match="Resource type 'project' not supported"):
        dispatcher.read_resource("vitally://project/p1")
    assert transport.calls == []
