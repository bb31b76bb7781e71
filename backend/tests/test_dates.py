from datetime import datetime, timedelta, timezone

import pytest

from scorebook.errors import DataIntegrityError, ValidationError
from scorebook.services.games.dates import (
    format_date,
    parse_stored_date,
    parse_submitted_date,
    to_stored,
)


def test_submitted_plain_date_is_midnight_utc():
    assert parse_submitted_date('2024-01-01') == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_submitted_timestamp_fallback():
    parsed = parse_submitted_date('2024-03-05T18:30:00-05:00')
    assert parsed == datetime(2024, 3, 5, 23, 30, tzinfo=timezone.utc)
    assert parse_submitted_date('2024-03-05T18:30:00Z').hour == 18


def test_submitted_empty_date_means_now():
    before = datetime.now(timezone.utc)
    parsed = parse_submitted_date('')
    assert before - timedelta(seconds=1) <= parsed <= datetime.now(timezone.utc)
    assert parse_submitted_date(None).tzinfo is not None


@pytest.mark.parametrize('raw', ['01/02/2024', '2024-13-01', 'yesterday', '2024-01-01 10:00',
                                 '9999-12-31T23:00:00-05:00', '0001-01-01T00:30:00+01:00'])
def test_submitted_garbage_is_rejected(raw):
    with pytest.raises(ValidationError):
        parse_submitted_date(raw)


def test_stored_legacy_layout_with_nanoseconds():
    parsed = parse_stored_date('2024-07-04 20:15:30.123456789-07:00')
    assert parsed == datetime(2024, 7, 5, 3, 15, 30, 123456, tzinfo=timezone.utc)


def test_stored_legacy_layout_without_fraction():
    assert parse_stored_date('2024-07-04 00:00:00+00:00') == datetime(2024, 7, 4, tzinfo=timezone.utc)


def test_stored_rfc3339_layout():
    assert parse_stored_date('2024-07-04T10:00:00Z') == datetime(2024, 7, 4, 10, tzinfo=timezone.utc)
    assert parse_stored_date('2024-07-04T12:00:00.5+02:00') == datetime(
        2024, 7, 4, 10, 0, 0, 500000, tzinfo=timezone.utc
    )


def test_stored_unreadable_date_is_an_integrity_error():
    with pytest.raises(DataIntegrityError):
        parse_stored_date('last tuesday')


def test_written_dates_read_back_and_format_as_timestamps():
    value = datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc)
    stored = to_stored(value)
    assert stored == '2024-01-01 09:30:00+00:00'
    assert parse_stored_date(stored) == value
    assert format_date(value) == '2024-01-01T09:30:00+00:00'
    assert format_date(None) is None


def test_stored_date_outside_utc_range_is_an_integrity_error():
    with pytest.raises(DataIntegrityError):
        parse_stored_date('9999-12-31 23:00:00-05:00')
