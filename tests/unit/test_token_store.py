import json

from src.adapters.token_store import ClientStorageTokenStore, FileTokenStore, InMemoryTokenStore


class FakeClientStorage:
    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value

    def remove(self, key):
        self.data.pop(key, None)


class FakePage:
    def __init__(self):
        self.client_storage = FakeClientStorage()


def test_in_memory_store():
    store = InMemoryTokenStore()
    assert store.get() is None
    store.set("abc")
    assert store.get() == "abc"
    store.clear()
    assert store.get() is None


def test_file_store_round_trip(tmp_path):
    path = tmp_path / "state" / "session.json"
    store = FileTokenStore(path, key="token")

    assert store.get() is None
    store.set("abc")

    assert json.loads(path.read_text()) == {"token": "abc"}
    assert FileTokenStore(path).get() == "abc"

    store.clear()
    assert not path.exists()
    store.clear()


def test_file_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json")
    assert FileTokenStore(path).get() is None


def test_file_store_other_key(tmp_path):
    path = tmp_path / "session.json"
    path.write_text(json.dumps({"jwt": "abc"}))
    assert FileTokenStore(path, key="token").get() is None


def test_client_storage_store_uses_single_key():
    page = FakePage()
    store = ClientStorageTokenStore(page, key="token")

    store.set("abc")
    assert page.client_storage.data == {"token": "abc"}
    assert store.get() == "abc"

    store.clear()
    assert page.client_storage.data == {}
    assert store.get() is None
