"""Eventbrite service configuration."""

import os
from dataclasses import dataclass


@dataclass
class EventbriteConfig:
    """Eventbrite configuration settings."""

    # API configuration
    base_url: str = ""
    organization_id: str = ""

    # Authentication
    api_key: str = ""

    def __post_init__(self):
        """Load unset values from the environment."""
        if not self.base_url:
            self.base_url = os.environ.get('EVENTBRITE_BASE_URL', 'https://www.eventbriteapi.com/v3')
        if not self.organization_id:
            self.organization_id = os.environ.get('EVENTBRITE_ORGANIZATION_ID', '')
        if not self.api_key:
            self.api_key = os.environ.get('EVENTBRITE_API_KEY', '')

    def validate(self) -> bool:
        """Validate the configuration."""
        if not self.api_key:
            raise ValueError("EVENTBRITE_API_KEY environment variable is required")
        if not self.organization_id:
            raise ValueError("EVENTBRITE_ORGANIZATION_ID environment variable is required")
        return True
