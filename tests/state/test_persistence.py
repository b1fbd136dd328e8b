import json

import pytest

from content_cost_model.state.persistence import BlobStore, InMemoryStore, JsonFileStore, StorageError


def test_in_memory_round_trip():
    store = InMemoryStore()
    assert store.read("k") is None
    store.write("k", {"version": 7, "project": {"name": "x"}})
    assert store.read("k") == {"version": 7, "project": {"name": "x"}}
    store.delete("k")
    assert store.read("k") is None


def test_in_memory_returns_copies():
    store = InMemoryStore()
    document = {"project": {"name": "x"}}
    store.write("k", document)
    document["project"]["name"] = "changed"
    assert store.read("k")["project"]["name"] == "x"


def test_json_file_store_round_trip(tmp_path):
    store = JsonFileStore(tmp_path / "data")
    store.write("proj", {"version": 7, "project": {}})
    assert (tmp_path / "data" / "proj.json").exists()
    assert store.read("proj") == {"version": 7, "project": {}}
    assert not list((tmp_path / "data").glob("*.tmp"))


def test_json_file_store_missing_key(tmp_path):
    assert JsonFileStore(tmp_path).read("nothing") is None


@pytest.mark.parametrize("content", ["{not json", json.dumps([1, 2, 3])])
def test_json_file_store_ignores_corrupt_documents(tmp_path, content):
    (tmp_path / "proj.json").write_text(content, encoding="utf-8")
    assert JsonFileStore(tmp_path).read("proj") is None


def test_json_file_store_write_failure(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    with pytest.raises(StorageError):
        JsonFileStore(blocker).write("proj", {})


def test_json_file_store_delete(tmp_path):
    store = JsonFileStore(tmp_path)
    store.write("proj", {})
    store.delete("proj")
    store.delete("proj")
    assert store.read("proj") is None


def test_unserialisable_document_leaves_no_temp_file(tmp_path):
    store = JsonFileStore(tmp_path)
    store.write("proj", {"version": 7})
    with pytest.raises(StorageError):
        store.write("proj", {"version": 7, "project": object()})
    assert [p.name for p in tmp_path.iterdir()] == ["proj.json"]
    assert store.read("proj") == {"version": 7}


def test_partial_store_cannot_be_created():
    class ReadOnlyStore(BlobStore):
        def read(self, key):
            return None

    with pytest.raises(TypeError):
        ReadOnlyStore()
