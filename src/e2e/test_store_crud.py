from pathlib import Path
import pytest

from contact_search.DB.api import make_store
from contact_search.DB.memory_store import MemoryStore
from contact_search.DB.sqlite_store import SQLiteStore
from contact_search.models import Contact


def _seed() -> list[Contact]:
    return [
        Contact(id="b", name="Bea Arthur", email="bea@x.com", phone="555-0101", company="Golden"),
        Contact(id="a", name="Al Green", email="al@y.com", contact_type="Owner"),
    ]


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path: Path):
    dsn = "memory://" if request.param == "memory" else f"sqlite:///{tmp_path / 'db' / 'contacts.sqlite'}"
    s = make_store(dsn, contacts=_seed())
    yield s
    s.close()


@pytest.mark.e2e
def test_read_list_and_count(store):
    assert store.count() == 2
    assert [c.id for c in store.list_all()] == ["b", "a"]       # insertion order
    assert store.read("a") == _seed()[1]
    with pytest.raises(KeyError):
        store.read("missing")


@pytest.mark.e2e
def test_create_and_bulk_create(store):
    store.create(Contact(id="c", name="Cy Young"))
    n = store.bulk_create([Contact(id="d", name="Di"), Contact(id="e", name="Ed")])
    assert n == 2
    assert store.count() == 5
    assert [c.id for c in store.list_all()][-3:] == ["c", "d", "e"]


@pytest.mark.e2e
def test_create_same_id_replaces_in_place(store):
    store.create(Contact(id="b", name="Bea Smith"))
    assert store.count() == 2
    assert store.read("b").name == "Bea Smith"
    assert [c.id for c in store.list_all()] == ["b", "a"]


@pytest.mark.e2e
def test_update_returns_new_contact(store):
    before = store.read("b")
    after = store.update("b", phone="555-0199", city="Miami")
    assert after.phone == "555-0199" and after.city == "Miami"
    assert after.name == before.name
    assert after is not before
    assert store.read("b") == after


@pytest.mark.e2e
def test_update_errors(store):
    with pytest.raises(KeyError):
        store.update("missing", name="X")
    with pytest.raises(ValueError):
        store.update("b", website="https://example.com")


@pytest.mark.e2e
def test_delete(store):
    assert store.delete("b") is True
    assert store.delete("b") is False
    assert store.count() == 1


def test_make_store_types_and_bad_dsn(tmp_path: Path):
    mem = make_store("memory://")
    assert isinstance(mem, MemoryStore) and mem.count() == 0
    sq = make_store(f"sqlite:///{tmp_path / 'x.sqlite'}")
    assert isinstance(sq, SQLiteStore)
    sq.close()
    with pytest.raises(ValueError):
        make_store("postgres://localhost/crm")


@pytest.mark.e2e
def test_sqlite_rows_survive_reopen(tmp_path: Path):
    dsn = f"sqlite:///{tmp_path / 'contacts.sqlite'}"
    s1 = make_store(dsn, contacts=_seed())
    s1.close()
    s2 = make_store(dsn)
    try:
        assert [c.name for c in s2.list_all()] == ["Bea Arthur", "Al Green"]
        assert s2.read("a").contact_type == "Owner"
    finally:
        s2.close()
