import json
from pathlib import Path

from scribe.storage.local import LocalKeyValueStore


def test_memory_only_store() -> None:
    store = LocalKeyValueStore()
    store.put("key", {"value": 1})

    assert store.get("key") == {"value": 1}
    assert store.get("missing") is None
    assert store.keys() == ["key"]


def test_put_writes_file_and_reloads(store_path: Path) -> None:
    store = LocalKeyValueStore(store_path)
    store.put("user:bob", {"username": "bob"})

    assert store_path.exists()
    with open(store_path) as f:
        assert json.load(f) == {"records": {"user:bob": {"username": "bob"}}}

    reloaded = LocalKeyValueStore(store_path)
    assert reloaded.get("user:bob") == {"username": "bob"}


def test_get_returns_copy(kv_store: LocalKeyValueStore) -> None:
    kv_store.put("tree", [{"id": "a"}])
    value = kv_store.get("tree")
    value.append({"id": "b"})

    assert kv_store.get("tree") == [{"id": "a"}]


def test_delete(kv_store: LocalKeyValueStore, store_path: Path) -> None:
    kv_store.put("key", 1)

    assert kv_store.delete("key") is True
    assert kv_store.delete("key") is False
    assert LocalKeyValueStore(store_path).get("key") is None


def test_no_temp_files_left_behind(kv_store: LocalKeyValueStore, store_path: Path) -> None:
    for i in range(3):
        kv_store.put(f"key{i}", i)

    assert [p.name for p in store_path.parent.iterdir()] == [store_path.name]
