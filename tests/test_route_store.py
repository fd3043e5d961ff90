from routeguard.domain.models import RouteRecord, route_key
from routeguard.store.memory_store import RouteStore


def test_insert_get_remove():
    store = RouteStore()
    rec = RouteRecord(url="/a", http_method="GET")
    store.insert(route_key("/a", "GET"), rec)

    assert "/a|GET" in store
    assert store.get("/a|GET") == rec
    assert store.get("/a|POST") is None

    assert store.remove("/a|GET") == rec
    assert store.remove("/a|GET") is None
    assert len(store) == 0


def test_last_insert_wins():
    store = RouteStore()
    store.add(RouteRecord(url="/a", http_method="GET", pre_authorization="first"))
    store.add(RouteRecord(url="/a", http_method="GET", pre_authorization="second"))

    assert len(store) == 1
    assert store.get("/a|GET").pre_authorization == "second"
    assert [r.pre_authorization for r in store.list_all()] == ["second"]


def test_records_are_immutable_and_rebased_by_copy():
    rec = RouteRecord(url="/items", http_method="GET")
    moved = rec.with_url("/api/items")

    assert rec.url == "/items"
    assert moved.url == "/api/items"
    assert moved.key == "/api/items|GET"
    assert not moved.guarded
