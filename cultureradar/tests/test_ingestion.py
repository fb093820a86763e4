from datetime import datetime
from unittest.mock import patch

import pytest

from cultureradar.config.data_sources import SOURCES
from cultureradar.db import db
from cultureradar.models import Event, EventCategory, Location
from cultureradar.new_event_handler import process_new_events
from cultureradar.scrapers.base import ScrapedEvent
from cultureradar.services.ingestion import run_ingestion
from cultureradar.source_manager import SourceManager
from cultureradar.scrapers.eventbrite import EventbriteScraper


def scraped(external_id='EB123', source='EVENTBRITE', name='Indie Night', venue='Lee\'s Palace', city='Toronto'):
    return ScrapedEvent(
        external_id=external_id,
        external_source=source,
        name=name,
        start_time=datetime(2030, 5, 20, 21, 0),
        category=EventCategory.MUSIC,
        price=18.0,
        location={'name': venue, 'city': city, 'latitude': None, 'longitude': None},
    )


def stored_events():
    with db.session() as session:
        return session.query(Event).order_by(Event.id).all()


def count_locations():
    with db.session() as session:
        return session.query(Location).count()


def test_duplicate_listing_is_stored_once():
    new, skipped = process_new_events([scraped(), scraped(name='Indie Night (copy)')], 'eventbrite')

    assert (new, skipped) == (1, 1)
    events = stored_events()
    assert len(events) == 1
    assert events[0].name == 'Indie Night'
    assert events[0].approved is False
    assert events[0].external_source == 'EVENTBRITE'


def test_rerun_does_not_duplicate_or_update():
    process_new_events([scraped()], 'eventbrite')
    new, skipped = process_new_events([scraped(name='Renamed upstream')], 'eventbrite')

    assert (new, skipped) == (0, 1)
    assert [event.name for event in stored_events()] == ['Indie Night']


def test_same_external_id_from_another_source_is_distinct():
    new, _ = process_new_events([scraped(source='EVENTBRITE'), scraped(source='CANADA_GOV')], 'eventbrite')
    assert new == 2


def test_venues_are_reused_across_listings():
    process_new_events([
        scraped('EB1', venue="Lee's Palace"),
        scraped('EB2', venue="LEE'S PALACE", city='toronto'),
        scraped('EB3', venue='The Horseshoe'),
    ], 'eventbrite')
    assert count_locations() == 2


def test_insert_that_loses_the_race_is_skipped():
    process_new_events([scraped()], 'eventbrite')

    # Simulate a concurrent pass that checked before the first insert committed
    with patch('cultureradar.stores.event_store.exists_by_external_id_and_source', return_value=False):
        new, skipped = process_new_events([scraped()], 'eventbrite')

    assert (new, skipped) == (0, 1)
    assert len(stored_events()) == 1


@pytest.mark.parametrize('overrides', [
    {'name': ''},
    {'name': '   '},
    {'venue': '   '},
    {'city': ''},
])
def test_invalid_listing_is_skipped(overrides):
    new, skipped = process_new_events([scraped(**overrides)], 'eventbrite')

    assert (new, skipped) == (0, 1)
    assert stored_events() == []
    assert count_locations() == 0


def test_invalid_listing_does_not_stop_the_batch():
    new, skipped = process_new_events([
        scraped('A', venue='   '),
        scraped('B', name=' '),
        scraped('C'),
    ], 'eventbrite')

    assert (new, skipped) == (1, 2)
    assert [event.external_id for event in stored_events()] == ['C']


def test_listing_ending_before_it_starts_is_skipped():
    listing = scraped()
    listing.end_time = datetime(2030, 5, 20, 20, 0)

    assert process_new_events([listing], 'eventbrite') == (0, 1)


def test_stored_name_is_trimmed():
    process_new_events([scraped(name='  Indie Night  ')], 'eventbrite')
    assert [event.name for event in stored_events()] == ['Indie Night']


def test_failing_source_does_not_stop_the_others():
    sources = {'eventbrite': SOURCES['eventbrite'], 'canada-gov': SOURCES['canada-gov']}

    def fetch(source_id, registration):
        if source_id == 'eventbrite':
            raise ConnectionError("Eventbrite is down")
        return [scraped('CA-7', 'CANADA_GOV', venue='Musée', city='Quebec')]

    with patch.object(SourceManager, 'get_sources', return_value=sources), \
            patch.object(SourceManager, 'fetch_events', side_effect=fetch):
        report = run_ingestion()

    assert report.failed_sources == ['eventbrite']
    assert report.sources['canada-gov'].new == 1
    assert report.total_new == 1
    assert [event.external_id for event in stored_events()] == ['CA-7']


def test_unknown_source_id_is_rejected():
    with pytest.raises(ValueError):
        run_ingestion(['ticketmaster'])


def test_source_manager_loads_registered_classes():
    assert SourceManager.get_scraper_class(SOURCES['eventbrite']) is EventbriteScraper


def test_fetch_events_propagates_scraper_errors():
    with patch.object(EventbriteScraper, 'get_events', side_effect=ValueError("no api key")):
        with pytest.raises(ValueError):
            SourceManager.fetch_events('eventbrite', SOURCES['eventbrite'])
