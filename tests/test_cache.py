import threading
import time

from core.cache import AccountCache
from core.models import Account


def _accounts(*names):
    return [Account(id=str(i), name=name) for i, name in enumerate(names, start=1)]


def test_starts_empty():
    cache = AccountCache()
    assert cache.is_empty()
    assert cache.read_all() == []


def test_replace_overwrites_everything():
    cache = AccountCache(_accounts("Old One", "Old Two"))
    cache.replace(_accounts("New"))
    assert [a.name for a in cache.read_all()] == ["New"]
    assert len(cache) == 1


def test_read_all_returns_a_snapshot():
    cache = AccountCache(_accounts("Acme"))
    snapshot = cache.read_all()
    snapshot.clear()
    assert len(cache) == 1


def test_ensure_loaded_fetches_once():
    calls = []

    def loader():
        calls.append(1)
        return _accounts("Acme")

    cache = AccountCache()
    cache.ensure_loaded(loader)
    cache.ensure_loaded(loader)
    assert len(calls) == 1


def test_ensure_loaded_skips_loader_when_populated():
    cache = AccountCache(_accounts("Acme"))

    def loader():
        raise AssertionError("loader must not run")

    assert [a.name for a in cache.ensure_loaded(loader)] == ["Acme"]


def test_concurrent_first_reads_share_one_fetch():
    calls = []

    def slow_loader():
        calls.append(1)
        time.sleep(0.05)
        return _accounts("Acme")

    cache = AccountCache()
    threads = [threading.Thread(target=cache.ensure_loaded, args=(slow_loader,)) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(calls) == 1
