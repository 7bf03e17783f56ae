"""Tests for sample value selection."""

import datetime
from decimal import Decimal

from mschema.core.schema import contains_url, examples_to_str, is_email


def test_is_email():
    """Test email detection."""
    assert is_email("a@b.com")
    assert is_email("first.last-name@mail.example.org")
    assert not is_email("not an email")
    assert not is_email("user@localhost")


def test_contains_url():
    """Test URL detection."""
    assert contains_url("see https://example.com/x")
    assert contains_url("http://example.com")
    assert not contains_url("ftp://example.com")


def test_numbers_are_stringified():
    """Test numeric values become decimal strings."""
    assert examples_to_str([1, 2.5, Decimal("3.10")]) == ["1", "2.5", "3.10"]


def test_none_values_are_skipped():
    """Test None does not affect the result."""
    assert examples_to_str([None, "a", None, "b"]) == ["a", "b"]


def test_email_suppresses_whole_column():
    """Test an email value empties the result."""
    assert examples_to_str(["alice", "bob", "carol@example.com"]) == []
    assert examples_to_str(["carol@example.com", "alice"]) == []


def test_url_suppresses_whole_column():
    """Test a URL value empties the result."""
    assert examples_to_str(["home", "https://example.com/page"]) == []


def test_date_short_circuits_column():
    """Test a date value becomes the only example."""
    values = ["x", datetime.date(2024, 1, 5), "y"]
    assert examples_to_str(values) == ["2024-01-05"]

    stamp = datetime.datetime(2024, 1, 5, 10, 30)
    assert examples_to_str([stamp, datetime.date(2023, 1, 1)]) == [
        "2024-01-05 10:30:00"
    ]


def test_blank_strings_are_dropped():
    """Test empty and whitespace-only values are removed."""
    assert examples_to_str(["", "  ", "\t", "kept"]) == ["kept"]


def test_empty_input():
    """Test no values gives no examples."""
    assert examples_to_str([]) == []
