"""Base interface that all external event scrapers must implement."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from ..config.data_sources import get_external_source_tag, get_source_display_name
from ..config.external_services import HttpClientConfig
from ..models import Event, EventCategory, Location

logger = logging.getLogger(__name__)


@dataclass
class ScrapedEvent:
    """
    One listing from an external source, mapped to the event shape.

    Fields mirror Event; the venue is carried as plain location values and
    resolved to a stored Location at insert time.
    """
    external_id: str
    external_source: str
    name: str
    start_time: datetime
    category: EventCategory = EventCategory.OTHER
    description: Optional[str] = None
    end_time: Optional[datetime] = None
    image_url: Optional[str] = None
    price: Optional[float] = None
    is_free: bool = False
    location: Dict[str, Any] = field(default_factory=dict)

    def validate(self) -> None:
        """
        Check the listing against the stored event's requirements.

        Raises:
            ValueError: On a blank name or venue, a missing start time or an
                end time before the start time
        """
        if not (self.name or '').strip():
            raise ValueError(f"Listing {self.external_id} has no name")
        if self.start_time is None:
            raise ValueError(f"Listing {self.external_id} has no start time")
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError(f"Listing {self.external_id} ends before it starts")
        for key in ('name', 'city'):
            if not str(self.location.get(key) or '').strip():
                raise ValueError(f"Listing {self.external_id} has no venue {key}")

    def to_model(self, location: Location) -> Event:
        """Build an unapproved Event for the given stored location."""
        return Event(
            name=self.name.strip(),
            description=self.description,
            start_time=self.start_time,
            end_time=self.end_time,
            image_url=self.image_url,
            price=self.price,
            is_free=self.is_free,
            category=self.category,
            location=location,
            approved=False,
            external_id=self.external_id,
            external_source=self.external_source,
        )


class BaseScraper(ABC):
    """
    Base interface for all event scrapers.

    Each scraper is responsible for:
    1. Fetching listings from a specific source (e.g., Eventbrite)
    2. Converting the source's format into ScrapedEvent records
    3. Handling its own configuration and authentication if needed

    Network errors propagate to the caller; a listing that cannot be mapped
    is logged and skipped.
    """

    HEADERS = {
        'User-Agent': 'CultureRadar/1.0 (+https://cultureradar.ca)',
        'Accept': 'application/json',
    }

    def __init__(self, source_id: str, http_config: Optional[HttpClientConfig] = None):
        """
        Initialize the scraper with its source ID.

        Args:
            source_id: The source identifier (e.g., 'eventbrite')
            http_config: Timeouts for calls to the source
        """
        self.source_id = source_id
        self.http_config = http_config or HttpClientConfig()
        self.headers = self.HEADERS.copy()

    def name(self) -> str:
        """Return the display name of this scraper from the configuration."""
        return get_source_display_name(self.source_id)

    @property
    def external_source(self) -> str:
        """Provenance tag stored on every event from this source."""
        return get_external_source_tag(self.source_id)

    def _fetch_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET a JSON document, raising on HTTP errors and timeouts."""
        response = requests.get(url, headers=self.headers, params=params, timeout=self.http_config.timeout)
        response.raise_for_status()
        return response.json()

    @abstractmethod
    def get_events(self) -> List[ScrapedEvent]:
        """
        Fetch and return listings from this source.

        Returns:
            List[ScrapedEvent]: Every listing that could be mapped

        Raises:
            requests.RequestException: If the source cannot be reached
            ValueError: If the configuration is incomplete
        """
        pass

    def _map_all(self, raw_events: List[Dict[str, Any]]) -> List[ScrapedEvent]:
        """Map raw listings, skipping the ones that fail."""
        events = []
        for raw in raw_events:
            try:
                event = self.map_event(raw)
                if event is not None:
                    event.validate()
            except Exception as e:
                logger.error(f"Error mapping listing from {self.name()}: {e}")
                continue
            if event is not None:
                events.append(event)
        return events

    @abstractmethod
    def map_event(self, raw: Dict[str, Any]) -> Optional[ScrapedEvent]:
        """Convert one raw listing; return None to drop it silently."""
        pass


def parse_price(value: Any) -> Optional[float]:
    """Parse a price such as 25, '25.00' or '$25'; None when absent or unparseable."""
    if value is None or value == '':
        return None
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = str(value).strip().lower().replace('$', '').replace(',', '.')
    if cleaned in ('free', 'gratuit'):
        return 0.0
    try:
        return float(cleaned)
    except ValueError:
        return None


def parse_coordinate(value: Any) -> Optional[float]:
    if value is None or value == '':
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_coordinates(latitude: Any, longitude: Any) -> Dict[str, Optional[float]]:
    """Both coordinates, or neither when one of them is missing or invalid."""
    lat, lon = parse_coordinate(latitude), parse_coordinate(longitude)
    if lat is None or lon is None:
        return {'latitude': None, 'longitude': None}
    return {'latitude': lat, 'longitude': lon}
