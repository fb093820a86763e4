from datetime import datetime, timedelta

import pytest

from cultureradar.errors import ValidationFailed
from cultureradar.models import Event, EventCategory, Location

START = datetime(2030, 6, 1, 20, 0)


def build_event(**kwargs):
    values = dict(
        name='Jazz Night',
        start_time=START,
        category=EventCategory.MUSIC,
        location=Location(name='The Rex', city='Toronto'),
    )
    values.update(kwargs)
    return Event(**values)


@pytest.mark.parametrize('is_free, price, expected', [
    (True, None, True),
    (True, 30.0, True),
    (False, 0.0, True),
    (False, -1.0, True),
    (False, 15.0, False),
    (False, None, False),
])
def test_is_free_event(is_free, price, expected):
    assert build_event(is_free=is_free, price=price).is_free_event is expected


def test_effective_end_defaults_to_two_hours():
    assert build_event().effective_end_time == START + timedelta(hours=2)
    end = START + timedelta(hours=5)
    assert build_event(end_time=end).effective_end_time == end


@pytest.mark.parametrize('offset_minutes, happening, past', [
    (-1, False, False),
    (0, True, False),
    (119, True, False),
    (120, False, True),
    (600, False, True),
])
def test_happening_now_and_past_are_exclusive(offset_minutes, happening, past):
    event = build_event()
    now = START + timedelta(minutes=offset_minutes)
    assert event.is_happening_now(now) is happening
    assert event.is_past(now) is past
    assert not (event.is_happening_now(now) and event.is_past(now))


def test_formatted_date_and_time():
    single_day = build_event(end_time=START + timedelta(hours=2))
    assert single_day.formatted_date == '2030-06-01'
    assert single_day.formatted_time == '20:00 - 22:00'

    multi_day = build_event(end_time=datetime(2030, 6, 3, 18, 0))
    assert multi_day.formatted_date == '2030-06-01 - 2030-06-03'

    assert build_event().formatted_time == '20:00'


def test_to_dict_uses_camel_case_keys():
    data = build_event(price=0.0).to_dict(distance_km=1.5, now=START - timedelta(days=1))

    assert data['name'] == 'Jazz Night'
    assert data['startTime'] == '2030-06-01T20:00:00'
    assert data['endTime'] is None
    assert data['category'] == 'MUSIC'
    assert data['isFreeEvent'] is True
    assert data['isFree'] is False
    assert data['isPast'] is False
    assert data['distanceKm'] == 1.5
    assert data['location']['city'] == 'Toronto'
    assert data['externalId'] is None


def test_location_rejects_half_coordinates():
    with pytest.raises(ValidationFailed):
        Location(name='Venue', city='Ottawa', latitude=45.4)


def test_location_full_address():
    location = Location(name='Venue', address='1 Main St', city='Ottawa', province='ON', postal_code='K1A 0A1')
    assert location.full_address == '1 Main St, Ottawa, ON K1A 0A1'
    assert Location(name='Venue', city='Ottawa').full_address == 'Ottawa'
