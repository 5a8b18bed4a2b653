"""Text and date cleanup helpers for TVMaze payload fields."""

import re
from datetime import date, datetime

from bs4 import BeautifulSoup


def strip_html(summary: str | None) -> str | None:
    """
    Remove markup from a TVMaze summary.

    TVMaze summaries arrive as small HTML fragments, e.g.
    ``"<p>A <b>great</b> show.</p>"`` → ``"A great show."``

    Args:
        summary: Raw summary, possibly containing HTML

    Returns:
        Plain-text summary, or None if the input is blank
    """
    if summary is None or not summary.strip():
        return None

    text = BeautifulSoup(summary, "html.parser").get_text()

    # Collapse runs of whitespace left behind by block tags
    text = re.sub(r"\s+", " ", text).strip()

    return text or None


def parse_date(value: str | None) -> date | None:
    """
    Parse a TVMaze date or timestamp into a calendar date.

    Accepts plain dates (``"2024-01-01"``) and ISO timestamps
    (``"2024-01-01T20:00:00+00:00"``). The calendar date is taken as written,
    without converting the timestamp to another timezone.

    Args:
        value: Date or timestamp string

    Returns:
        Parsed date, or None if the value is blank or not a valid date
    """
    if not isinstance(value, str) or not value.strip():
        return None

    try:
        return datetime.fromisoformat(value.strip()).date()
    except ValueError:
        return None
