"""
Central manager for external event sources and their scrapers.

The registry in config/data_sources.py declares which scrapers exist and which
ones are enabled; this module loads them dynamically and fetches their listings.
Scrapers can be added or removed by updating the registry alone.
"""

import importlib
import logging
from typing import Dict, List, Optional, Type

from .config.data_sources import ScraperRegistration, SOURCES, get_enabled_sources
from .scrapers.base import BaseScraper, ScrapedEvent

logger = logging.getLogger(__name__)


class SourceManager:
    """Loads scrapers from their registration and fetches events from them."""

    @staticmethod
    def get_scraper_class(registration: ScraperRegistration) -> Type[BaseScraper]:
        """
        Dynamically import and return a scraper class from its registration.

        Args:
            registration: Registration info for the scraper, including its class path
                        Example path: 'cultureradar.scrapers.eventbrite.EventbriteScraper'

        Returns:
            Type[BaseScraper]: The scraper class (not instance)

        Raises:
            ImportError: If the module cannot be imported
            AttributeError: If the class doesn't exist in the module
            TypeError: If the class does not implement BaseScraper
        """
        try:
            module_path, class_name = registration.scraper_class.rsplit('.', 1)
            module = importlib.import_module(module_path)
            scraper_class = getattr(module, class_name)
        except (ImportError, AttributeError) as e:
            logger.error(f"Failed to load scraper class {registration.scraper_class}: {e}")
            raise

        if not issubclass(scraper_class, BaseScraper):
            raise TypeError(f"Scraper class {class_name} must implement BaseScraper interface")
        return scraper_class

    @staticmethod
    def get_sources(source_ids: Optional[List[str]] = None) -> Dict[str, ScraperRegistration]:
        """
        Registrations to run: every enabled source, or the requested ones.

        Raises:
            ValueError: If a requested source ID is not registered
        """
        if not source_ids:
            return get_enabled_sources()
        unknown = [source_id for source_id in source_ids if source_id not in SOURCES]
        if unknown:
            raise ValueError(f"Unknown source(s): {', '.join(unknown)}. Available: {', '.join(SOURCES)}")
        return {source_id: SOURCES[source_id] for source_id in source_ids}

    @staticmethod
    def fetch_events(source_id: str, registration: ScraperRegistration) -> List[ScrapedEvent]:
        """
        Fetch mapped listings from a single source.

        Errors are logged and re-raised so the caller can isolate the failing source.
        """
        scraper_class = SourceManager.get_scraper_class(registration)
        scraper = scraper_class()
        logger.info(f"Fetching events from {scraper.name()}")
        try:
            events = scraper.get_events()
        except Exception as e:
            logger.error(f"Error fetching events from {source_id}: {e}")
            raise
        logger.info(f"Mapped {len(events)} events from {scraper.name()}")
        return events
