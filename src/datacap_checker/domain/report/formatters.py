# report/formatters.py

from collections.abc import Iterable, Mapping, Sequence
from typing import Literal

from ..application import ApplicationInfo

FILFOX_ADDRESS_URL = "https://filfox.info/en/address/"

WARNING = "\u26a0\ufe0f"
CHECK_MARK = "\u2714\ufe0f"

_IEC_UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB", "YiB")
_MARKDOWN_SPECIALS = "\\`*_{}[]()#+-.!|<>"
_ADDRESS_CHUNK = 41

Alignment = Literal["l", "c", "r"]


def format_bytes(size: float) -> str:
    """
    Render a byte count with binary (IEC) units, e.g. ``1.50 GiB``.

    Values below one KiB are rendered as whole bytes.
    """
    value = float(size)
    if abs(value) < 1024:
        return f"{value:.0f} B"

    unit = 0
    while abs(value) >= 1024 and unit < len(_IEC_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{value:.2f} {_IEC_UNITS[unit]}"


def format_percentage(fraction: float, decimals: int = 2) -> str:
    return f"{fraction * 100:.{decimals}f}%"


def ordinal(number: int) -> str:
    """
    English ordinal of a positive integer: 1st, 2nd, 3rd, 4th, 11th, 22nd.
    """
    if 10 <= number % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


def wrap_in_code(text: str) -> str:
    """
    Render text as inline code, widening the fence when it holds backticks.
    """
    if "`" not in text:
        return f"`{text}`"
    return f"`` {text} ``"


def escape(text: str) -> str:
    """
    Backslash-escape markdown control characters.
    """
    return "".join(f"\\{char}" if char in _MARKDOWN_SPECIALS else char for char in text)


def generate_link(text: str, url: str) -> str:
    return f"[{text}]({url})"


def provider_link(provider: str) -> str:
    return generate_link(provider, FILFOX_ADDRESS_URL + provider)


def linkify_address(address: str) -> str:
    """
    Link an address to its explorer page, breaking long addresses into
    41-character lines so table cells stay narrow.
    """
    chunks = [
        address[start : start + _ADDRESS_CHUNK]
        for start in range(0, len(address), _ADDRESS_CHUNK)
    ]
    return generate_link("<br/>".join(chunks), FILFOX_ADDRESS_URL + address)


def linkify_application(application: ApplicationInfo | None) -> str:
    """
    Organisation name linked to its application, or "Unknown".
    """
    if application is None:
        return "Unknown"
    if application.url is None:
        return wrap_in_code(application.organization_name)
    return generate_link(escape(application.organization_name), application.url)


def render_approvers(approvers: Iterable[tuple[str, int]] | None) -> str:
    """
    Render (login, count) pairs as ``count``login lines, or "Unknown".
    """
    if approvers is None:
        return "Unknown"
    return "<br/>".join(f"{wrap_in_code(str(count))}{name}" for name, count in approvers)


def gfm_table(
    rows: Sequence[Mapping[str, object]],
    columns: Sequence[tuple[str, str, Alignment]],
) -> str:
    """
    Render rows as a GitHub-flavoured markdown table.

    Args:
        rows: Row mappings keyed by column key.
        columns: (key, heading, alignment) per column, in display order.

    Returns:
        str: The table, one markdown line per row.
    """
    markers = {"l": ":--", "c": ":-:", "r": "--:"}

    lines = [
        "| " + " | ".join(heading for _, heading, _ in columns) + " |",
        "| " + " | ".join(markers[align] for _, _, align in columns) + " |",
    ]
    lines.extend(
        "| " + " | ".join(_cell(row.get(key, "")) for key, _, _ in columns) + " |"
        for row in rows
    )
    return "\n".join(lines)


def _cell(value: object) -> str:
    return str(value).replace("|", "\\|").replace("\n", "<br/>")
