from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest

from cultureradar.config.external_services import CanadaGovConfig, EventbriteConfig
from cultureradar.models import EventCategory
from cultureradar.scrapers.base import parse_coordinates, parse_price
from cultureradar.scrapers.canada_gov import CanadaGovScraper, map_category
from cultureradar.scrapers.eventbrite import EventbriteScraper


def json_response(data):
    response = MagicMock()
    response.json.return_value = data
    response.raise_for_status.return_value = None
    return response


def eventbrite_listing(event_id='EB123', **overrides):
    listing = {
        'id': event_id,
        'name': {'text': 'Indie Night'},
        'description': {'text': 'Great show', 'html': '<p>Great <b>show</b></p>'},
        'start': {'local': '2030-05-20T21:00:00'},
        'end': {'local': '2030-05-21T01:00:00'},
        'logo': {'url': 'https://img.example.com/indie.png'},
        'is_free': False,
        'category_id': '103',
        'ticket_availability': {'minimum_ticket_price': {'major_value': '18.50'}},
        'venue': {
            'name': "Lee's Palace",
            'address': {
                'address_1': '529 Bloor St W',
                'city': 'Toronto',
                'region': 'ON',
                'postal_code': 'M5S 1Y5',
                'latitude': '43.6655',
                'longitude': '-79.4101',
            },
        },
    }
    listing.update(overrides)
    return listing


@pytest.fixture
def eventbrite():
    return EventbriteScraper(config=EventbriteConfig(api_key='secret', organization_id='42'))


def test_eventbrite_maps_listing(eventbrite):
    event = eventbrite.map_event(eventbrite_listing())

    assert event.external_id == 'EB123'
    assert event.external_source == 'EVENTBRITE'
    assert event.name == 'Indie Night'
    assert event.description == 'Great show'
    assert event.start_time == datetime(2030, 5, 20, 21, 0)
    assert event.end_time == datetime(2030, 5, 21, 1, 0)
    assert event.price == 18.5
    assert event.category is EventCategory.MUSIC
    assert event.location['city'] == 'Toronto'
    assert event.location['latitude'] == pytest.approx(43.6655)


def test_eventbrite_skips_online_events(eventbrite):
    assert eventbrite.map_event(eventbrite_listing(venue=None)) is None


@pytest.mark.parametrize('title', [{'text': ''}, {'text': '   '}, None])
def test_eventbrite_rejects_untitled_listing(eventbrite, title):
    with pytest.raises(ValueError):
        eventbrite.map_event(eventbrite_listing(name=title))


def test_eventbrite_treats_blank_venue_as_online(eventbrite):
    listing = eventbrite_listing()
    listing['venue']['name'] = '   '
    assert eventbrite.map_event(listing) is None


def test_eventbrite_get_events_drops_untitled_listings(eventbrite):
    page = json_response({'events': [eventbrite_listing('1', name={'text': ' '}), eventbrite_listing('2')],
                          'pagination': {'has_more_items': False}})

    with patch('cultureradar.scrapers.base.requests.get', return_value=page):
        events = eventbrite.get_events()

    assert [event.external_id for event in events] == ['2']


def test_eventbrite_follows_continuation(eventbrite):
    pages = [
        json_response({'events': [eventbrite_listing('1')],
                       'pagination': {'has_more_items': True, 'continuation': 'abc'}}),
        json_response({'events': [eventbrite_listing('2'), {'id': 'broken'}],
                       'pagination': {'has_more_items': False}}),
    ]

    with patch('cultureradar.scrapers.base.requests.get', side_effect=pages) as mock_get:
        events = eventbrite.get_events()

    assert [event.external_id for event in events] == ['1', '2']
    assert mock_get.call_count == 2
    args, kwargs = mock_get.call_args
    assert args[0] == 'https://www.eventbriteapi.com/v3/organizations/42/events/'
    assert kwargs['params']['continuation'] == 'abc'
    assert kwargs['headers']['Authorization'] == 'Bearer secret'
    assert kwargs['timeout'] == (10.0, 30.0)


def test_eventbrite_requires_credentials():
    scraper = EventbriteScraper(config=EventbriteConfig(api_key='', organization_id=''))
    scraper.config.api_key = ''
    with pytest.raises(ValueError):
        scraper.get_events()


@pytest.mark.parametrize('payload', [
    [{'id': 1}],
    {'events': [{'id': 1}]},
    {'result': {'records': [{'id': 1}]}},
])
def test_canada_gov_accepts_feed_shapes(payload):
    assert CanadaGovScraper._records(payload) == [{'id': 1}]


def test_canada_gov_rejects_unknown_feed():
    with pytest.raises(ValueError):
        CanadaGovScraper._records({'unexpected': True})


def test_canada_gov_maps_bilingual_record():
    scraper = CanadaGovScraper(config=CanadaGovConfig(feed_url='https://open.canada.ca/feed.json'))
    record = {
        '_id': 77,
        'title_fr': 'Nuit des musées',
        'description_en': 'Museums open late',
        'start_date': '2030-05-18T18:00:00',
        'venue_fr': 'Musée des beaux-arts',
        'city': 'Montreal',
        'category_fr': 'Musée',
        'price': 'Gratuit',
        'latitude': '45.4985',
    }

    event = scraper.map_event(record)

    assert event.external_id == '77'
    assert event.external_source == 'CANADA_GOV'
    assert event.name == 'Nuit des musées'
    assert event.category is EventCategory.MUSEUM
    assert event.price == 0.0
    assert event.is_free is True
    assert event.location['latitude'] is None and event.location['longitude'] is None


def test_canada_gov_ignores_blank_values():
    scraper = CanadaGovScraper(config=CanadaGovConfig(feed_url='https://open.canada.ca/feed.json'))
    base = {'id': 'x', 'start_date': '2030-07-01', 'venue_en': 'Parliament Hill', 'city': 'Ottawa'}

    with pytest.raises(ValueError):
        scraper.map_event({**base, 'title_en': '   '})
    assert scraper.map_event({**base, 'title_en': 'Canada Day', 'venue_en': '  '}) is None

    event = scraper.map_event({**base, 'title_en': '  ', 'title_fr': ' Fête du Canada '})
    assert event.name == 'Fête du Canada'


def test_canada_gov_get_events_skips_bad_records():
    scraper = CanadaGovScraper(config=CanadaGovConfig(feed_url='https://open.canada.ca/feed.json'))
    feed = {'events': [
        {'id': 'a', 'title_en': 'Canada Day', 'start_date': '2030-07-01', 'venue_en': 'Parliament Hill',
         'city': 'Ottawa', 'category_en': 'Festival', 'free': 'true'},
        {'id': 'b', 'title_en': 'No date'},
    ]}

    with patch('cultureradar.scrapers.base.requests.get', return_value=json_response(feed)):
        events = scraper.get_events()

    assert len(events) == 1
    assert events[0].start_time == datetime(2030, 7, 1)
    assert events[0].category is EventCategory.FESTIVAL
    assert events[0].is_free is True


@pytest.mark.parametrize('label, expected', [
    ('Live Music', EventCategory.MUSIC),
    ('Théâtre', EventCategory.THEATRE),
    ('Art contemporain', EventCategory.ART),
    (None, EventCategory.OTHER),
    ('Sports', EventCategory.OTHER),
])
def test_map_category(label, expected):
    assert map_category(label) is expected


@pytest.mark.parametrize('value, expected', [
    (None, None), ('', None), (25, 25.0), ('$12.50', 12.5), ('Free', 0.0), ('n/a', None),
])
def test_parse_price(value, expected):
    assert parse_price(value) == expected


def test_parse_coordinates_all_or_nothing():
    assert parse_coordinates('45.5', '-73.6') == {'latitude': 45.5, 'longitude': -73.6}
    assert parse_coordinates('45.5', 'abc') == {'latitude': None, 'longitude': None}
