# src/e2e/test_index_cache.py

import dataclasses
import threading

import pytest

from contact_search.cache import (
    IndexCache, get_memoized_index, clear_index_cache, get_cache_stats,
)
from contact_search.index import build_index
from contact_search.models import Contact


@pytest.fixture
def cache():
    return IndexCache()


def _amy() -> Contact:
    return Contact(id="c1", name="Amy Pond", email="amy@tardis.org", phone="555-0100", company="Leadworth")


def test_hit_returns_same_index_without_rebuild(cache):
    c = _amy()
    first = cache.get(c)
    second = cache.get(c)
    assert first is second
    st = cache.stats()
    assert st.size == 1
    assert (st.hits, st.misses) == (1, 1)


def test_equal_record_values_share_an_entry(cache):
    cache.get(_amy())
    cache.get(_amy())          # new object, same id and fields
    assert cache.stats().size == 1


def test_changed_field_rebuilds_and_evicts_old_version(cache):
    c = _amy()
    old_key = cache.key_for(c)
    cache.get(c)

    moved = dataclasses.replace(c, phone="555-0199")
    idx = cache.get(moved)

    assert idx == build_index(moved)
    assert idx.phone_digits == "5550199"
    st = cache.stats()
    assert st.size == 1
    assert old_key not in st.keys
    assert st.keys == [cache.key_for(moved)]
    assert st.evictions == 1


def test_non_searchable_field_change_keeps_entry(cache):
    c = _amy()
    cache.get(c)
    cache.get(dataclasses.replace(c, city="London"))
    st = cache.stats()
    assert (st.size, st.hits, st.misses) == (1, 1, 1)


def test_distinct_contacts_get_distinct_entries(cache):
    cache.get(_amy())
    cache.get(Contact(id="c2", name="Rory Williams"))
    assert cache.stats().size == 2


def test_ids_sharing_a_prefix_do_not_evict_each_other(cache):
    cache.get(Contact(id="1", name="One"))
    cache.get(Contact(id="1:2", name="Other"))
    cache.get(Contact(id="1", name="One"))
    assert cache.stats().size == 2


def test_key_format_and_fingerprint_change_detection(cache):
    c = _amy()
    fp = IndexCache.fingerprint(c)
    assert cache.key_for(c) == f"c1:{fp}"
    assert 0 <= fp <= 0xFFFFFFFF
    assert IndexCache.fingerprint(dataclasses.replace(c, name="Amy Williams")) != fp
    assert IndexCache.fingerprint(dataclasses.replace(c, city="Cardiff")) == fp


def test_reset_clears_everything(cache):
    cache.get(_amy())
    cache.reset()
    st = cache.stats()
    assert st.size == 0 and st.keys == [] and st.misses == 0
    assert len(cache) == 0


def test_concurrent_lookups_keep_one_entry_per_contact(cache):
    versions = [dataclasses.replace(_amy(), phone=f"555-01{i:02d}") for i in range(20)]

    def worker():
        for v in versions:
            cache.get(v)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert cache.stats().size == 1


def test_module_level_default_cache_helpers():
    clear_index_cache()
    try:
        c = _amy()
        assert get_memoized_index(c) is get_memoized_index(c)
        assert get_cache_stats().size == 1
    finally:
        clear_index_cache()
    assert get_cache_stats().size == 0
