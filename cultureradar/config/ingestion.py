"""Scheduling configuration for external event ingestion."""

import os
from dataclasses import dataclass

from .environment import env_flag


@dataclass
class IngestionConfig:
    """
    Settings for the periodic ingestion job.

    Fields:
        enabled: Whether the scheduled job is started with the application
        interval_hours: Hours between two ingestion passes
        run_on_startup: Whether the first pass runs right after startup
    """
    enabled: bool = True
    interval_hours: int = 0
    run_on_startup: bool = False

    def __post_init__(self):
        self.enabled = self.enabled and env_flag('INGESTION_ENABLED', True)
        if not self.interval_hours:
            self.interval_hours = int(os.environ.get('INGESTION_INTERVAL_HOURS', '6'))
        if not self.run_on_startup:
            self.run_on_startup = env_flag('INGESTION_RUN_ON_STARTUP', False)

    def validate(self) -> bool:
        if self.interval_hours <= 0:
            raise ValueError("INGESTION_INTERVAL_HOURS must be a positive number of hours")
        return True
