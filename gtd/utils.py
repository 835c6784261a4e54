"""
Utility functions for the GTD agent.
"""

from datetime import datetime
from typing import Iterable, List, Optional, TypeVar

from gtd.constants import DEFAULT_DATE_FORMATS
from gtd.exceptions import NotFoundError, ValidationError

R = TypeVar("R")


def parse_date(date_string: str) -> Optional[datetime]:
    """
    Parse a date string using multiple supported formats.

    Args:
        date_string: The date string to parse.

    Returns:
        A datetime object if parsing succeeds, None otherwise.

    Examples:
        >>> parse_date("2024-12-31")  # ISO 8601
        >>> parse_date("2024-12-31 09:30")
        >>> parse_date("31/12/2024")  # DD/MM/YYYY
        >>> parse_date("December 31, 2024")  # Month DD, YYYY
    """
    for fmt in DEFAULT_DATE_FORMATS:
        try:
            return datetime.strptime(date_string.strip(), fmt)
        except ValueError:
            continue
    return None


def resolve_id(records: Iterable[R], id_or_prefix: str, kind: str = "record") -> R:
    """
    Find a record by full id or by an unambiguous id prefix.

    Args:
        records: Records to search (anything with an ``id`` attribute).
        id_or_prefix: Full id, or the first characters of one.
        kind: Human-readable record kind for error messages.

    Raises:
        NotFoundError: If nothing matches.
        ValidationError: If the prefix matches more than one record.
    """
    records = list(records)
    for record in records:
        if record.id == id_or_prefix:
            return record

    matches: List[R] = [r for r in records if r.id.startswith(id_or_prefix)]
    if not matches:
        raise NotFoundError(f"No {kind} matches '{id_or_prefix}'.")
    if len(matches) > 1:
        raise ValidationError(
            f"'{id_or_prefix}' matches {len(matches)} {kind}s; use more characters."
        )
    return matches[0]
