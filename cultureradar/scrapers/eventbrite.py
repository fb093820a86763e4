"""Scraper for Eventbrite events"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

from ..config.external_services import EventbriteConfig
from ..models import EventCategory
from .base import BaseScraper, ScrapedEvent, parse_coordinates, parse_price

logger = logging.getLogger(__name__)

# Eventbrite top-level category ids
CATEGORY_MAP = {
    '103': EventCategory.MUSIC,
    '104': EventCategory.FILM,
    '105': EventCategory.THEATRE,
    '110': EventCategory.FESTIVAL,
    '113': EventCategory.HERITAGE,
    '115': EventCategory.WORKSHOP,
    '119': EventCategory.WORKSHOP,
}


class EventbriteScraper(BaseScraper):
    """Scraper for an organization's live events on Eventbrite"""

    MAX_PAGES = 10

    def __init__(self, config: Optional[EventbriteConfig] = None, **kwargs):
        super().__init__('eventbrite', **kwargs)
        self.config = config or EventbriteConfig()

    def _events_url(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/organizations/{self.config.organization_id}/events/"

    def get_events(self) -> List[ScrapedEvent]:
        """Get live events, following continuation tokens."""
        self.config.validate()
        self.headers['Authorization'] = f"Bearer {self.config.api_key}"

        raw_events: List[Dict[str, Any]] = []
        params: Dict[str, Any] = {
            'status': 'live',
            'order_by': 'start_asc',
            'expand': 'venue,ticket_availability',
        }
        for _ in range(self.MAX_PAGES):
            data = self._fetch_json(self._events_url(), params=params)
            raw_events.extend(data.get('events', []))
            pagination = data.get('pagination') or {}
            if not pagination.get('has_more_items') or not pagination.get('continuation'):
                break
            params['continuation'] = pagination['continuation']

        logger.info(f"Found {len(raw_events)} events from {self.name()}")
        return self._map_all(raw_events)

    def map_event(self, raw: Dict[str, Any]) -> Optional[ScrapedEvent]:
        venue = raw.get('venue') or {}
        address = venue.get('address') or {}
        venue_name = (venue.get('name') or '').strip()
        city = (address.get('city') or '').strip()
        if not venue_name or not city:
            # Online events have no venue to attach to
            logger.info(f"Skipping Eventbrite event {raw.get('id')} without a physical venue")
            return None

        name = ((raw.get('name') or {}).get('text') or '').strip()
        if not name:
            raise ValueError(f"Eventbrite event {raw.get('id')} has no title")

        description = raw.get('description') or {}
        if description.get('html'):
            text = BeautifulSoup(description['html'], 'html.parser').get_text(' ', strip=True)
        else:
            text = description.get('text')

        ticket_availability = raw.get('ticket_availability') or {}
        minimum_price = (ticket_availability.get('minimum_ticket_price') or {}).get('major_value')

        return ScrapedEvent(
            external_id=str(raw['id']),
            external_source=self.external_source,
            name=name,
            description=text,
            start_time=datetime.fromisoformat(raw['start']['local']),
            end_time=datetime.fromisoformat(raw['end']['local']) if (raw.get('end') or {}).get('local') else None,
            image_url=(raw.get('logo') or {}).get('url'),
            price=parse_price(minimum_price),
            is_free=bool(raw.get('is_free')),
            category=CATEGORY_MAP.get(str(raw.get('category_id')), EventCategory.OTHER),
            location={
                'name': venue_name,
                'address': address.get('address_1'),
                'city': city,
                'province': address.get('region'),
                'postal_code': address.get('postal_code'),
                **parse_coordinates(address.get('latitude') or venue.get('latitude'),
                                    address.get('longitude') or venue.get('longitude')),
            },
        )
