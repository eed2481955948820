# report/test_builder.py

import pytest

from datacap_checker.domain.report import ReportBuilder

pytestmark = pytest.mark.unit


def _builder() -> ReportBuilder:
    return ReportBuilder(summary_title="# Summary", full_title="# Full")


def test_shared_lines_reach_both_documents() -> None:
    """
    ARRANGE: builder with one shared line
    ACT:     render both documents
    ASSERT:  line appears under each title
    """
    builder = _builder().add_shared("warning")

    assert (builder.render_summary(), builder.render_full()) == (
        "# Summary\nwarning",
        "# Full\nwarning",
    )


def test_detail_lines_only_reach_full_document() -> None:
    """
    ARRANGE: interleaved shared and detail lines
    ACT:     collect lines
    ASSERT:  summary holds shared lines, full holds all in order
    """
    builder = _builder().add_shared("a").add_detail("b", "c").add_shared("d")

    assert (builder.summary_lines, builder.full_lines) == (
        ("a", "d"),
        ("a", "b", "c", "d"),
    )


def test_summary_is_subsequence_of_full() -> None:
    """
    ARRANGE: many interleaved additions
    ACT:     compare line sequences
    ASSERT:  summary lines occur in the full document in order
    """
    builder = _builder()
    for index in range(10):
        if index % 3:
            builder.add_detail(f"detail {index}")
        else:
            builder.add_shared(f"shared {index}")

    remaining = iter(builder.full_lines)

    assert all(line in remaining for line in builder.summary_lines)
