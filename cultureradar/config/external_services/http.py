"""HTTP client settings shared by all external source clients."""

import os
from typing import Tuple
from dataclasses import dataclass


@dataclass
class HttpClientConfig:
    """Timeouts (seconds) applied to every call to an external source."""

    connect_timeout: float = 0
    read_timeout: float = 0

    def __post_init__(self):
        if not self.connect_timeout:
            self.connect_timeout = float(os.environ.get('EXTERNAL_CONNECT_TIMEOUT', '10'))
        if not self.read_timeout:
            self.read_timeout = float(os.environ.get('EXTERNAL_READ_TIMEOUT', '30'))

    @property
    def timeout(self) -> Tuple[float, float]:
        """Timeout tuple in the form expected by requests."""
        return (self.connect_timeout, self.read_timeout)
