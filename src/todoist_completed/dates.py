# SPDX-FileCopyrightText: 2025 Todoist Completed Contributors
# SPDX-License-Identifier: MPL-2.0

"""Target date resolution from daily-note names.

Daily note formats use moment.js tokens (YYYY-MM-DD and friends), so the
parser here understands that token set and matches strictly: the whole hint
must conform, or the caller falls back to today.
"""

import re
from dataclasses import dataclass
from datetime import date

from todoist_completed.config import DEFAULT_DATE_FORMAT

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
WEEKDAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)

# Longest first so "MMMM" wins over "MM".
TOKENS = ("YYYY", "MMMM", "dddd", "MMM", "ddd", "YY", "MM", "DD", "Do", "M", "D")

_TOKEN_PATTERNS = {
    "YYYY": r"(\d{4})",
    "YY": r"(\d{2})",
    "MMMM": "(?i:(" + "|".join(MONTH_NAMES) + "))",
    "MMM": "(?i:(" + "|".join(m[:3] for m in MONTH_NAMES) + "))",
    "MM": r"(\d{2})",
    "M": r"(\d{1,2})",
    "DD": r"(\d{2})",
    "D": r"(\d{1,2})",
    "Do": r"(\d{1,2}(?:st|nd|rd|th))",
    "dddd": "(?i:(" + "|".join(WEEKDAY_NAMES) + "))",
    "ddd": "(?i:(" + "|".join(d[:3] for d in WEEKDAY_NAMES) + "))",
}


@dataclass(frozen=True)
class DateResolution:
    """Where the target date came from."""

    target: date
    source: str
    is_today: bool


def _tokenize(fmt: str) -> list[tuple[str, str]]:
    """Split a moment-style format into ("token", X) and ("literal", X) parts."""
    parts: list[tuple[str, str]] = []
    i = 0
    while i < len(fmt):
        if fmt[i] == "[":
            end = fmt.find("]", i + 1)
            if end != -1:
                parts.append(("literal", fmt[i + 1:end]))
                i = end + 1
                continue
        for token in TOKENS:
            if fmt.startswith(token, i):
                parts.append(("token", token))
                i += len(token)
                break
        else:
            parts.append(("literal", fmt[i]))
            i += 1
    return parts


def _ordinal(day: int) -> str:
    if 10 <= day % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_date(value: date, fmt: str = DEFAULT_DATE_FORMAT) -> str:
    """Render a date using moment-style tokens."""
    rendered = {
        "YYYY": f"{value.year:04d}",
        "YY": f"{value.year % 100:02d}",
        "MMMM": MONTH_NAMES[value.month - 1],
        "MMM": MONTH_NAMES[value.month - 1][:3],
        "MM": f"{value.month:02d}",
        "M": str(value.month),
        "DD": f"{value.day:02d}",
        "D": str(value.day),
        "Do": _ordinal(value.day),
        "dddd": WEEKDAY_NAMES[value.weekday()],
        "ddd": WEEKDAY_NAMES[value.weekday()][:3],
    }
    return "".join(
        rendered[text] if kind == "token" else text for kind, text in _tokenize(fmt)
    )


def _field_value(token: str, raw: str) -> tuple[str, int]:
    """Map a matched token to a (field, value) pair."""
    if token == "YYYY":
        return "year", int(raw)
    if token == "YY":
        # Same pivot as moment: 69-99 are 1900s, 00-68 are 2000s.
        two_digit = int(raw)
        return "year", two_digit + (1900 if two_digit > 68 else 2000)
    if token in ("MMMM", "MMM"):
        names = [m.lower()[: len(raw)] for m in MONTH_NAMES]
        return "month", names.index(raw.lower()) + 1
    if token in ("MM", "M"):
        return "month", int(raw)
    if token == "Do":
        number = int(raw[:-2])
        if _ordinal(number) != raw.lower():
            raise ValueError(f"Bad ordinal suffix: {raw}")
        return "day", number
    if token in ("DD", "D"):
        return "day", int(raw)
    names = [d.lower()[: len(raw)] for d in WEEKDAY_NAMES]
    return "weekday", names.index(raw.lower())


def parse_strict(text: str, fmt: str = DEFAULT_DATE_FORMAT, today: date | None = None) -> date | None:
    """Parse text as a date in the given format, or return None.

    The whole string must match. Repeated fields must agree and a weekday
    field must match the resulting date. Missing year, month, or day default
    to the current year, January, and the 1st.
    """
    today = today or date.today()
    parts = _tokenize(fmt)
    tokens = [text for kind, text in parts if kind == "token"]
    if not tokens:
        return None

    pattern = "".join(
        _TOKEN_PATTERNS[text] if kind == "token" else re.escape(text)
        for kind, text in parts
    )
    match = re.fullmatch(pattern, text)
    if not match:
        return None

    fields: dict[str, int] = {}
    try:
        for token, raw in zip(tokens, match.groups()):
            field, value = _field_value(token, raw)
            if fields.setdefault(field, value) != value:
                return None
        result = date(
            fields.get("year", today.year),
            fields.get("month", 1),
            fields.get("day", 1),
        )
    except ValueError:
        return None

    if "weekday" in fields and fields["weekday"] != result.weekday():
        return None
    return result


def resolve_target_date(
    hint: str | None,
    date_format: str = DEFAULT_DATE_FORMAT,
    today: date | None = None,
) -> DateResolution:
    """Pick the date to report on.

    Args:
        hint: Note basename (without extension), if there is an active note
        date_format: Daily note format, e.g. "YYYY-MM-DD"
        today: Current local date (defaults to date.today())

    Returns:
        DateResolution with the target date and a label for status messages
    """
    today = today or date.today()
    date_format = date_format or DEFAULT_DATE_FORMAT

    if hint:
        parsed = parse_strict(hint, date_format, today=today)
        if parsed is not None:
            return DateResolution(
                target=parsed,
                source=f"note filename ({format_date(parsed, date_format)})",
                is_today=parsed == today,
            )

    return DateResolution(target=today, source="today", is_today=True)
