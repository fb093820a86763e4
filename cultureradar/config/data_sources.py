"""Configuration for external event sources and their scrapers."""

from dataclasses import dataclass
from typing import Dict

# Internal imports - environment must be first
from .environment import env_flag


@dataclass
class ScraperRegistration:
    """
    Registration of a scraper with the source manager.

    Fields:
        enabled: Whether this scraper is enabled
        scraper_class: Full path to scraper class (e.g., 'cultureradar.scrapers.eventbrite.EventbriteScraper')
        external_source: Provenance tag stored on every event from this source (e.g., 'EVENTBRITE')
        name: Display name of the source (e.g., 'Eventbrite')
    """
    enabled: bool
    scraper_class: str
    external_source: str
    name: str


# Registry of available scrapers for fetching new data
SOURCES = {
    'eventbrite': ScraperRegistration(
        enabled=env_flag('EVENTBRITE_ENABLED', True),
        scraper_class='cultureradar.scrapers.eventbrite.EventbriteScraper',
        external_source='EVENTBRITE',
        name='Eventbrite'
    ),
    'canada-gov': ScraperRegistration(
        enabled=env_flag('CANADA_GOV_ENABLED', True),
        scraper_class='cultureradar.scrapers.canada_gov.CanadaGovScraper',
        external_source='CANADA_GOV',
        name='Canada Open Data'
    ),
}


def get_enabled_sources() -> Dict[str, ScraperRegistration]:
    """
    Get all enabled scrapers.

    Returns:
        Dict[str, ScraperRegistration]: Dictionary of source_id -> registration for all enabled scrapers
    """
    return {k: v for k, v in SOURCES.items() if v.enabled}


def get_source_display_name(source_id: str) -> str:
    """
    Get the display name for a given source ID.

    Raises:
        ValueError: If no source is found with the given ID
    """
    registration = SOURCES.get(source_id)
    if not registration:
        raise ValueError(f"No source found with ID: {source_id}")
    return registration.name


def get_external_source_tag(source_id: str) -> str:
    """
    Get the provenance tag (e.g., 'EVENTBRITE') stored on events from a source.

    Raises:
        ValueError: If no source is found with the given ID
    """
    registration = SOURCES.get(source_id)
    if not registration:
        raise ValueError(f"No source found with ID: {source_id}")
    return registration.external_source
