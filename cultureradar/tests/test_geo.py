from datetime import datetime, timezone

import pytest

from cultureradar.utils.geo import haversine_km
from cultureradar.utils.timezone import parse_iso_datetime, to_local_naive


def test_haversine_same_point_is_zero():
    assert haversine_km(43.65, -79.38, 43.65, -79.38) == 0.0


def test_haversine_toronto_to_ottawa():
    assert haversine_km(43.6532, -79.3832, 45.4215, -75.6972) == pytest.approx(352, abs=5)


def test_parse_iso_datetime_localizes_utc():
    # 2030-01-15 is in EST (UTC-5)
    assert parse_iso_datetime('2030-01-15T17:00:00Z') == datetime(2030, 1, 15, 12, 0)
    assert parse_iso_datetime('2030-01-15T17:00:00') == datetime(2030, 1, 15, 17, 0)
    assert parse_iso_datetime(None) is None


def test_to_local_naive_keeps_naive_values():
    naive = datetime(2030, 7, 1, 9, 0)
    assert to_local_naive(naive) is naive
    assert to_local_naive(datetime(2030, 7, 1, 13, 0, tzinfo=timezone.utc)) == datetime(2030, 7, 1, 9, 0)
