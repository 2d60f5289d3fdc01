import json

import pytest

from core.cache import AccountCache
from core.dispatcher import Dispatcher
from core.mock_data import MockResponder


class RecordingTransport:
    """Transport double: records every call, then delegates or fails."""

    def __init__(self, inner=None, error=None):
        self.inner = inner if inner is not None else MockResponder()
        self.error = error
        self.calls = []

    def call(self, endpoint, method="GET", body=None):
        self.calls.append((endpoint, method, body))
        if self.error is not None:
            raise self.error
        return self.inner.call(endpoint, method, body)

    def endpoints(self):
        return [endpoint for endpoint, _, _ in self.calls]


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def cache():
    return AccountCache()


@pytest.fixture
def dispatcher(transport, cache):
    return Dispatcher(transport, cache)


@pytest.fixture
def invoke_json(dispatcher):
    """Invoke a tool and decode its JSON payload."""

    def _invoke(name, arguments=None):
        return json.loads(dispatcher.invoke(name, arguments))

    return _invoke
