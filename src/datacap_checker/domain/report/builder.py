# report/builder.py


class ReportBuilder:
    """
    Accumulate the summary and full documents side by side.

    Every shared line is appended to both documents and detail lines to the
    full document only, so the summary body is always a sub-sequence of the
    full body.
    """

    __slots__ = ("_full", "_full_title", "_summary", "_summary_title")

    def __init__(self, *, summary_title: str, full_title: str) -> None:
        self._summary_title = summary_title
        self._full_title = full_title
        self._summary: list[str] = []
        self._full: list[str] = []

    def add_shared(self, *lines: str) -> "ReportBuilder":
        self._summary.extend(lines)
        self._full.extend(lines)
        return self

    def add_detail(self, *lines: str) -> "ReportBuilder":
        self._full.extend(lines)
        return self

    @property
    def summary_lines(self) -> tuple[str, ...]:
        return tuple(self._summary)

    @property
    def full_lines(self) -> tuple[str, ...]:
        return tuple(self._full)

    def render_summary(self) -> str:
        return "\n".join((self._summary_title, *self._summary))

    def render_full(self) -> str:
        return "\n".join((self._full_title, *self._full))
