# storage/test_reports.py

import pytest

from datacap_checker.storage import (
    load_allocator_generated_reports,
    load_generated_reports,
    load_latest_allocator_generated_report,
    load_latest_generated_report,
    save_allocator_generated_report,
    save_generated_report,
)

pytestmark = pytest.mark.unit


def test_save_generated_report_returns_row_id() -> None:
    """
    ARRANGE: empty data store
    ACT:     save two report pointers
    ASSERT:  ids increase
    """
    first = save_generated_report("f1abc", "https://example/1.md")
    second = save_generated_report("f1abc", "https://example/2.md")

    assert second > first


def test_latest_generated_report_is_newest() -> None:
    """
    ARRANGE: two pointers for the same client
    ACT:     load_latest_generated_report
    ASSERT:  returns the second pointer
    """
    save_generated_report("f1abc", "https://example/1.md")
    save_generated_report("f1abc", "https://example/2.md")

    actual = load_latest_generated_report("f1abc")

    assert actual.file_path == "https://example/2.md"


def test_latest_generated_report_none_for_unknown_client() -> None:
    """
    ARRANGE: pointer for a different client
    ACT:     load_latest_generated_report
    ASSERT:  returns None
    """
    save_generated_report("f1other", "https://example/1.md")

    actual = load_latest_generated_report("f1abc")

    assert actual is None


def test_generated_reports_listed_newest_first() -> None:
    """
    ARRANGE: three pointers for one client and one for another
    ACT:     load_generated_reports
    ASSERT:  only the client's pointers, newest first
    """
    for index in range(3):
        save_generated_report("f1abc", f"https://example/{index}.md")
    save_generated_report("f1other", "https://example/x.md")

    actual = [record.file_path for record in load_generated_reports("f1abc")]

    assert actual == [
        "https://example/2.md",
        "https://example/1.md",
        "https://example/0.md",
    ]


def test_generated_report_has_created_at() -> None:
    """
    ARRANGE: one saved pointer
    ACT:     load it back
    ASSERT:  created_at is populated by the database
    """
    save_generated_report("f1abc", "https://example/1.md")

    actual = load_latest_generated_report("f1abc")

    assert actual.created_at


def test_allocator_reports_match_address_or_id() -> None:
    """
    ARRANGE: pointers saved under an address and its id
    ACT:     load by either key
    ASSERT:  both lookups find the pointer
    """
    save_allocator_generated_report("f1alloc", "f0999", "Allocator", "https://x/r.md")

    by_address = load_allocator_generated_reports("f1alloc")
    by_id = load_allocator_generated_reports("f0999")

    assert (len(by_address), len(by_id)) == (1, 1)


def test_latest_allocator_report_is_newest() -> None:
    """
    ARRANGE: two allocator pointers
    ACT:     load_latest_allocator_generated_report
    ASSERT:  returns the second URL
    """
    save_allocator_generated_report("f1alloc", "f0999", "Allocator", "https://x/1.md")
    save_allocator_generated_report("f1alloc", "f0999", "Allocator", "https://x/2.md")

    actual = load_latest_allocator_generated_report("f1alloc")

    assert actual.url == "https://x/2.md"


def test_allocator_reports_respect_limit() -> None:
    """
    ARRANGE: three allocator pointers
    ACT:     load with limit 2
    ASSERT:  two records returned
    """
    for index in range(3):
        save_allocator_generated_report("f1alloc", "f0999", "A", f"https://x/{index}.md")

    actual = load_allocator_generated_reports("f1alloc", limit=2)

    assert len(actual) == 2
