"""Date handling for game submissions and stored game rows.

Submissions carry a plain ``YYYY-MM-DD`` date, or a full RFC 3339 timestamp
as the fallback. Stored rows come in two shapes: the legacy layout
``2006-01-02 15:04:05.999999999-07:00`` (space separator, up to nine
fractional digits, numeric offset), which is also what we write, and the
standard RFC 3339 layout with a ``T`` separator.
"""
import re
from datetime import datetime, timezone
from typing import Optional, Union

from scorebook.errors import DataIntegrityError, ValidationError

INPUT_DATE_FORMAT = '%Y-%m-%d'

_LEGACY_STORED = re.compile(
    r'^(\d{4}-\d{2}-\d{2}) (\d{2}:\d{2}:\d{2})(?:\.(\d{1,9}))?\s?([+-]\d{2}:?\d{2}|Z)$'
)
_RFC3339 = re.compile(
    r'^(\d{4}-\d{2}-\d{2})T(\d{2}:\d{2}:\d{2})(?:\.(\d{1,9}))?([+-]\d{2}:?\d{2}|Z)?$'
)


def _from_match(match: re.Match) -> datetime:
    day, clock, fraction, offset = match.groups()
    # strptime's %f stops at microseconds
    micros = (fraction or '0')[:6].ljust(6, '0')
    if not offset or offset == 'Z':
        offset = '+0000'
    return datetime.strptime(f"{day} {clock}.{micros}{offset}", '%Y-%m-%d %H:%M:%S.%f%z')


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_submitted_date(raw: Optional[str]) -> datetime:
    """Parse the date of a submission; empty means "now"."""
    if raw is None or not str(raw).strip():
        return datetime.now(timezone.utc)
    text = str(raw).strip()
    try:
        return datetime.strptime(text, INPUT_DATE_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        pass
    match = _RFC3339.match(text)
    if match:
        try:
            return _as_utc(_from_match(match))
        except (ValueError, OverflowError):
            pass
    raise ValidationError('Invalid date format. Please use YYYY-MM-DD')


def parse_stored_date(raw: Union[str, datetime, None]) -> Optional[datetime]:
    """Read a ``game_date`` value back from the store.

    Tries the legacy stored layout first, then RFC 3339. A value matching
    neither is a data-integrity problem and raises instead of defaulting.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return _as_utc(raw)
    text = raw.strip()
    for pattern in (_LEGACY_STORED, _RFC3339):
        match = pattern.match(text)
        if not match:
            continue
        try:
            return _as_utc(_from_match(match))
        except (ValueError, OverflowError):
            continue
    raise DataIntegrityError(f"Unreadable stored game date: {raw!r}")


def to_stored(value: datetime) -> str:
    return _as_utc(value).isoformat(sep=' ')


def format_date(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return _as_utc(value).isoformat()
