import pytest

from contact_search.cache import IndexCache
from contact_search.models import Contact, SortState
from contact_search.sorting import (
    compare_values, sort_contacts, toggle_sort, apply_column_filters, apply_view,
)


def _rows() -> list[Contact]:
    return [
        Contact(id="1", name="Zoe Smith", email="zoe@b.com", phone="(555) 300-0000", city="Austin", state="TX", contact_type="Broker"),
        Contact(id="2", name="Émile Smithers", email="emile@a.com", phone="99", city=None, state="CA", contact_type="Owner"),
        Contact(id="3", name="adam Blacksmith", email="adam@c.com", phone=None, city="Dallas", state="TX", contact_type="Broker"),
        Contact(id="4", name="Frank Ocean", email="frank@d.com", phone="555-100-0000", city="austin", state="TX", contact_type="Lender"),
    ]


@pytest.mark.parametrize("direction", ["asc", "desc"])
def test_blank_values_sort_last_in_both_directions(direction):
    assert compare_values(None, "x", "text", direction) == 1
    assert compare_values("  ", "x", "text", direction) == 1
    assert compare_values("x", None, "text", direction) == -1
    assert compare_values(None, "", "text", direction) == 0


def test_text_compare_is_natural_and_case_insensitive():
    assert compare_values("Item 9", "item 10") == -1
    assert compare_values("apple", "Banana") == -1
    assert compare_values("apple", "Banana", direction="desc") == 1
    assert compare_values("ÉMILE", "emile") == 0


def test_email_compare_uses_local_part():
    assert compare_values("zed@aaa.com", "amy@zzz.com", "emailLocal") == 1


def test_phone_compare_is_numeric_on_digits():
    assert compare_values("(555) 100-0000", "99", "phoneDigits") == 1
    assert compare_values("0099", "99", "phoneDigits") == 0
    assert compare_values("12", "9", "phoneDigits") == 1


def test_very_long_digit_runs_compare_without_error():
    long_nine = "a" + "9" * 5000
    assert compare_values(long_nine, "b") == -1
    assert compare_values("x" + "9" * 5000, "x" + "1" + "0" * 5000) == -1
    assert compare_values("x" + "0" * 10 + "7", "x7") == 0
    assert compare_values("9" * 6000, "8" * 6000, "phoneDigits") == 1


def test_sort_contacts_by_columns():
    rows = _rows()
    by_city = sort_contacts(rows, SortState("city", "asc"))
    assert [c.id for c in by_city] == ["1", "4", "3", "2"]        # Austin == austin keeps input order; blank last
    by_city_desc = sort_contacts(rows, SortState("city", "desc"))
    assert [c.id for c in by_city_desc] == ["3", "1", "4", "2"]
    by_phone = sort_contacts(rows, SortState("phone", "asc"))
    assert [c.id for c in by_phone] == ["2", "4", "1", "3"]
    by_type = sort_contacts(rows, SortState("contactType", "desc"))
    assert [c.id for c in by_type] == ["2", "4", "1", "3"]


def test_sort_contacts_ignores_unknown_column():
    rows = _rows()
    assert sort_contacts(rows, SortState("website")) == rows
    assert sort_contacts(rows, None) == rows


def test_toggle_sort_cycle():
    s = toggle_sort(None, "name")
    assert s == SortState("name", "asc")
    s = toggle_sort(s, "name")
    assert s == SortState("name", "desc")
    assert toggle_sort(s, "name") is None
    assert toggle_sort(SortState("name", "desc"), "city") == SortState("city", "asc")


def test_column_filters_and_across_columns():
    rows = _rows()
    assert [c.id for c in apply_column_filters(rows, {"state": ["TX"]})] == ["1", "3", "4"]
    assert [c.id for c in apply_column_filters(rows, {"state": ["TX"], "contactType": ["Broker"]})] == ["1", "3"]
    assert [c.id for c in apply_column_filters(rows, {"state": ["TX", "CA"], "contactType": ["Owner", "Lender"]})] == ["2", "4"]
    assert apply_column_filters(rows, {"state": []}) == rows
    assert apply_column_filters(rows, None) == rows


def test_view_without_search_defaults_to_name_order():
    out = apply_view(_rows(), "", cache=IndexCache())
    assert [c.name for c in out] == ["adam Blacksmith", "Émile Smithers", "Frank Ocean", "Zoe Smith"]


def test_view_without_search_uses_column_sort():
    out = apply_view(_rows(), "ab", SortState("state", "asc"), cache=IndexCache())
    assert [c.id for c in out] == ["2", "1", "3", "4"]


def test_view_with_search_keeps_relevance_order():
    out = apply_view(_rows(), "smith", cache=IndexCache())
    # prefix hits (Smith, Smithers) first, then the substring hit (Blacksmith)
    assert [c.id for c in out] == ["2", "1", "3"]


def test_view_with_search_and_user_sort_overrides_relevance():
    out = apply_view(_rows(), "smith", SortState("email", "desc"), cache=IndexCache())
    assert [c.id for c in out] == ["1", "2", "3"]


def test_view_applies_filters_after_search():
    out = apply_view(_rows(), "smith", filters={"state": ["TX"]}, cache=IndexCache())
    assert [c.id for c in out] == ["1", "3"]
