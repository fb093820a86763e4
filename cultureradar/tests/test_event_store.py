from datetime import datetime

import pytest

from cultureradar.db import db
from cultureradar.errors import ValidationFailed
from cultureradar.models import EventCategory
from cultureradar.stores import event_store, location_store

from .conftest import make_event, make_location


@pytest.fixture
def catalog(toronto, montreal):
    """A small mix of free, paid, approved and pending events in two cities."""
    return {
        'free_toronto': make_event(toronto, 'Free Concert', datetime(2030, 6, 1, 18), is_free=True),
        'zero_price_toronto': make_event(toronto, 'Open Gallery', datetime(2030, 6, 2, 10),
                                         category=EventCategory.ART, price=0.0),
        'paid_toronto': make_event(toronto, 'Symphony', datetime(2030, 6, 3, 19), price=45.0),
        'free_montreal': make_event(montreal, 'Jazz Fest', datetime(2030, 7, 1, 12),
                                    category=EventCategory.FESTIVAL, is_free=True),
        'pending_toronto': make_event(toronto, 'Pending Show', datetime(2030, 6, 4, 20),
                                      approved=False, is_free=True),
    }


def search(**kwargs):
    with db.session() as session:
        return event_store.find_events(session, **kwargs)


def test_free_events_in_toronto(catalog):
    page = search(city='Toronto', is_free=True, approved=True)

    names = [event.name for event in page.content]
    assert names == ['Free Concert', 'Open Gallery']
    assert page.total_elements == 2
    assert page.total_pages == 1


def test_city_match_is_case_insensitive(catalog):
    assert search(city='  tOrOnTo ').total_elements == 4


def test_paid_filter_is_the_complement_of_free(catalog):
    page = search(is_free=False)
    assert [event.name for event in page.content] == ['Symphony']


def test_every_result_satisfies_every_filter(catalog):
    start, end = datetime(2030, 6, 1), datetime(2030, 6, 30)
    page = search(city='Toronto', is_free=True, start_date=start, end_date=end, approved=True,
                  category=EventCategory.MUSIC)

    assert page.content
    for event in page.content:
        assert event.location.city == 'Toronto'
        assert event.is_free_event
        assert start <= event.start_time <= end
        assert event.approved
        assert event.category is EventCategory.MUSIC


def test_date_range_bounds(catalog):
    page = search(start_date=datetime(2030, 6, 2, 10), end_date=datetime(2030, 6, 3, 19))
    assert [event.name for event in page.content] == ['Open Gallery', 'Symphony']

    exclusive = search(start_date=datetime(2030, 6, 2, 10), end_date=datetime(2030, 6, 3, 19),
                       end_inclusive=False)
    assert [event.name for event in exclusive.content] == ['Open Gallery']


def test_pagination_and_sorting(catalog):
    first = search(page=0, size=2, sort_field='name', sort_dir='desc')
    second = search(page=1, size=2, sort_field='name', sort_dir='desc')

    assert [event.name for event in first.content] == ['Symphony', 'Pending Show']
    assert [event.name for event in second.content] == ['Open Gallery', 'Jazz Fest']
    assert first.total_elements == 5
    assert first.total_pages == 3


def test_ties_are_broken_by_id(toronto):
    same_start = datetime(2030, 1, 1, 19)
    ids = [make_event(toronto, f"Show {i}", same_start).id for i in range(3)]

    page = search(sort_field='startTime', sort_dir='desc')
    assert [event.id for event in page.content] == ids


def test_unknown_sort_field_is_rejected(catalog):
    with pytest.raises(ValidationFailed):
        search(sort_field='venue')


def test_page_to_dict_shape(catalog):
    data = search(size=3).to_dict(lambda event: event.id)
    assert set(data) == {'content', 'totalElements', 'totalPages', 'page', 'size'}
    assert data['totalElements'] == 5
    assert data['totalPages'] == 2


def test_exists_by_external_id_and_source(toronto):
    make_event(toronto, external_id='EB123', external_source='EVENTBRITE')
    with db.session() as session:
        assert event_store.exists_by_external_id_and_source(session, 'EB123', 'EVENTBRITE')
        assert not event_store.exists_by_external_id_and_source(session, 'EB123', 'CANADA_GOV')


def test_find_or_create_location_reuses_venue(toronto):
    with db.session() as session:
        same = location_store.find_or_create(session, {'name': 'massey hall', 'city': 'TORONTO'})
        other = location_store.find_or_create(session, {'name': 'Massey Hall', 'city': 'Hamilton'})
        assert same.id == toronto.id
        assert other.id != toronto.id


def test_list_locations_by_city(toronto, montreal):
    make_location('Roy Thomson Hall', 'Toronto')
    with db.session() as session:
        names = [location.name for location in location_store.list_locations(session, 'toronto')]
    assert names == ['Massey Hall', 'Roy Thomson Hall']
