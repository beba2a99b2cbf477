# src/e2e/test_normalize_and_tokenize.py

import pytest

from contact_search.normalize import (
    normalize_text, normalize_phone, tokenize, collation_key,
    format_phone_number, is_valid_phone_number,
)


def test_normalize_text_lowercases_trims_and_collapses_spaces():
    assert normalize_text("  Hello   World \t ") == "hello world"


def test_normalize_text_keeps_email_punctuation_and_drops_the_rest():
    assert normalize_text("Ann@Example.COM") == "ann@example.com"
    assert normalize_text("(555) 123-4567") == "555 123-4567"
    assert normalize_text("O'Neil!") == "oneil"


def test_normalize_text_keeps_accented_letters():
    assert normalize_text("José Müller") == "josé müller"
    assert tokenize("Zoë-Ñúñez") == ["zoë", "ñúñez"]


@pytest.mark.parametrize("value", [None, "", 42, ["x"]])
def test_normalize_text_degrades_to_empty(value):
    assert normalize_text(value) == ""


def test_normalize_phone_keeps_digits_in_order():
    assert normalize_phone("+1 (555) 010-0199 ext. 7") == "155501001997"
    assert normalize_phone(None) == ""
    assert normalize_phone("n/a") == ""


def test_tokenize_splits_on_space_hyphen_underscore_and_period():
    assert tokenize("  John-Paul  smith_jr.  ") == ["john", "paul", "smith", "jr"]


def test_tokenize_keeps_order_and_duplicates():
    assert tokenize("Acme acme ACME") == ["acme", "acme", "acme"]


def test_tokenize_empty_inputs():
    assert tokenize("") == []
    assert tokenize(None) == []
    assert tokenize("!!! ...") == []


def test_collation_key_ignores_case_and_accents():
    assert collation_key("Émile") == "emile"
    assert collation_key("ZOE") == collation_key("zoe")
    assert collation_key(None) == ""


def test_format_phone_number_us_shapes():
    assert format_phone_number("5550100199") == "(555) 010-0199"
    assert format_phone_number("1-555-010-0199") == "(555) 010-0199"
    assert format_phone_number("12345") == "12345"      # not US: returned as given
    assert format_phone_number("call me") == ""
    assert format_phone_number(None) == ""


def test_is_valid_phone_number():
    assert is_valid_phone_number("(555) 010-0199")
    assert is_valid_phone_number("+1 555 010 0199")
    assert not is_valid_phone_number("25550100199")
    assert not is_valid_phone_number("555-0199")
    assert not is_valid_phone_number(None)
