"""Scraper for the Government of Canada open-data events feed"""

import logging
from typing import Any, Dict, List, Optional

from ..config.external_services import CanadaGovConfig
from ..models import EventCategory
from ..utils.timezone import parse_iso_datetime
from .base import BaseScraper, ScrapedEvent, parse_coordinates, parse_price

logger = logging.getLogger(__name__)

# Keywords (English and French) found in the feed's category labels
CATEGORY_KEYWORDS = [
    (('music', 'musique', 'concert'), EventCategory.MUSIC),
    (('theatre', 'théâtre', 'theater'), EventCategory.THEATRE),
    (('dance', 'danse'), EventCategory.DANCE),
    (('film', 'cinema', 'cinéma'), EventCategory.FILM),
    (('exhibition', 'exposition'), EventCategory.EXHIBITION),
    (('museum', 'musée'), EventCategory.MUSEUM),
    (('festival',), EventCategory.FESTIVAL),
    (('heritage', 'patrimoine', 'history', 'histoire'), EventCategory.HERITAGE),
    (('literature', 'littérature', 'book', 'livre'), EventCategory.LITERATURE),
    (('comedy', 'humour'), EventCategory.COMEDY),
    (('workshop', 'atelier'), EventCategory.WORKSHOP),
    (('art',), EventCategory.ART),
]


def map_category(label: Optional[str]) -> EventCategory:
    if not label:
        return EventCategory.OTHER
    lowered = label.lower()
    for keywords, category in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return EventCategory.OTHER


def _first(raw: Dict[str, Any], *keys: str) -> Any:
    """First non-blank value among bilingual/alternate keys; strings come back stripped."""
    for key in keys:
        value = raw.get(key)
        if isinstance(value, str):
            value = value.strip()
        if value not in (None, ''):
            return value
    return None


class CanadaGovScraper(BaseScraper):
    """Scraper for the open-data cultural events feed (JSON)"""

    def __init__(self, config: Optional[CanadaGovConfig] = None, **kwargs):
        super().__init__('canada-gov', **kwargs)
        self.config = config or CanadaGovConfig()

    @staticmethod
    def _records(data: Any) -> List[Dict[str, Any]]:
        """The feed is either a bare list, {'events': [...]} or a CKAN datastore response."""
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            if isinstance(data.get('events'), list):
                return data['events']
            result = data.get('result')
            if isinstance(result, dict) and isinstance(result.get('records'), list):
                return result['records']
        raise ValueError("Unrecognized open-data feed format")

    def get_events(self) -> List[ScrapedEvent]:
        self.config.validate()
        records = self._records(self._fetch_json(self.config.feed_url))
        logger.info(f"Found {len(records)} events from {self.name()}")
        return self._map_all(records)

    def map_event(self, raw: Dict[str, Any]) -> Optional[ScrapedEvent]:
        external_id = _first(raw, 'id', '_id', 'event_id')
        name = _first(raw, 'title_en', 'title', 'name', 'title_fr')
        start_time = parse_iso_datetime(_first(raw, 'start_date', 'start', 'startDate'))
        if external_id is None or not name or start_time is None:
            raise ValueError(f"Listing is missing id, title or start date: {raw}")

        venue_name = _first(raw, 'venue_en', 'venue', 'location_name', 'venue_fr')
        city = _first(raw, 'city', 'municipality')
        if not venue_name or not city:
            logger.info(f"Skipping open-data event {external_id} without a venue")
            return None

        price = parse_price(_first(raw, 'price', 'cost'))
        free_flag = _first(raw, 'free', 'is_free')

        return ScrapedEvent(
            external_id=str(external_id),
            external_source=self.external_source,
            name=str(name),
            description=_first(raw, 'description_en', 'description', 'description_fr'),
            start_time=start_time,
            end_time=parse_iso_datetime(_first(raw, 'end_date', 'end', 'endDate')),
            image_url=_first(raw, 'image_url', 'image'),
            price=price,
            is_free=str(free_flag).lower() in ('true', '1', 'yes', 'oui') if free_flag is not None else price == 0,
            category=map_category(_first(raw, 'category_en', 'category', 'category_fr')),
            location={
                'name': venue_name,
                'address': _first(raw, 'address', 'street_address'),
                'city': city,
                'province': _first(raw, 'province', 'province_code'),
                'postal_code': _first(raw, 'postal_code'),
                **parse_coordinates(_first(raw, 'latitude', 'lat'), _first(raw, 'longitude', 'lon', 'lng')),
            },
        )
