"""Government of Canada open-data events feed configuration."""

import os
from dataclasses import dataclass


@dataclass
class CanadaGovConfig:
    """Open-data feed configuration settings."""

    feed_url: str = ""

    def __post_init__(self):
        if not self.feed_url:
            self.feed_url = os.environ.get('CANADA_GOV_FEED_URL', '')

    def validate(self) -> bool:
        if not self.feed_url:
            raise ValueError("CANADA_GOV_FEED_URL environment variable is required")
        return True
