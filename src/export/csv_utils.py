"""String helpers for building rows of the CSV export."""

import csv
import io


def escape_csv(value: str) -> str:
    """Quote a value for a CSV cell if it needs it.

    Values containing a comma, double quote, CR or LF are wrapped in double
    quotes with inner quotes doubled; anything else is returned unchanged.
    """
    if not value:
        # csv.writer quotes a lone empty field; an empty cell stays empty.
        return value
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    writer.writerow([value])
    return buffer.getvalue()[: -len("\r\n")]


def escape_then_join(values: list[str]) -> str:
    """Escape each value and join with ", "."""
    return ", ".join(escape_csv(v) for v in values)


def escape_then_join_then_escape(values: list[str]) -> str:
    """Format a list of values as a single CSV cell."""
    return escape_csv(escape_then_join(values))


def int_list_to_string(values: list[int]) -> str:
    """Format 1-based positions as one always-quoted cell, e.g. "2, 5, 6"."""
    return '"' + ", ".join(str(v) for v in values) + '"'
