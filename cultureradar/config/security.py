"""Authentication and authorization settings."""

import os
from dataclasses import dataclass

from .environment import IS_PRODUCTION_ENVIRONMENT, env_flag

DEVELOPMENT_JWT_SECRET = 'cultureradar-development-secret'


@dataclass
class AuthConfig:
    """Token signing and access policy configuration."""

    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    token_expiration_minutes: int = 0
    enforce_event_ownership: bool = False

    def __post_init__(self):
        """Load unset values from the environment."""
        if not self.jwt_secret:
            self.jwt_secret = os.environ.get('JWT_SECRET', '')
            if not self.jwt_secret and not IS_PRODUCTION_ENVIRONMENT:
                self.jwt_secret = DEVELOPMENT_JWT_SECRET
        if not self.token_expiration_minutes:
            self.token_expiration_minutes = int(os.environ.get('JWT_EXPIRATION_MINUTES', '1440'))
        if not self.enforce_event_ownership:
            self.enforce_event_ownership = env_flag('ENFORCE_EVENT_OWNERSHIP', False)

    def validate(self) -> bool:
        """Validate the configuration."""
        if not self.jwt_secret:
            raise ValueError("JWT_SECRET environment variable is required")
        return True


@dataclass
class BootstrapAdminConfig:
    """Optional administrator account created at startup."""

    username: str = ""
    email: str = ""
    password: str = ""

    def __post_init__(self):
        if not self.username:
            self.username = os.environ.get('ADMIN_USERNAME', '')
        if not self.email:
            self.email = os.environ.get('ADMIN_EMAIL', '')
        if not self.password:
            self.password = os.environ.get('ADMIN_PASSWORD', '')

    @property
    def is_configured(self) -> bool:
        return bool(self.username and self.email and self.password)


def get_auth_config() -> AuthConfig:
    """Get authentication configuration with validation."""
    config = AuthConfig()
    config.validate()
    return config
