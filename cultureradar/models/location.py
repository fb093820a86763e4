"""Location (venue) model definition."""

from typing import Dict, Any
from sqlalchemy import Column, String, Float, DateTime

from .base import Base, IdType
from ..errors import ValidationFailed
from ..utils.timezone import now_local


class Location(Base):
    """
    A venue where events take place.

    Fields:
        id: Unique identifier (auto-generated)
        name: Venue name
        address: Street address (optional)
        city: City the venue is in
        province: Province or state (optional)
        postal_code: Postal code (optional)
        latitude / longitude: Coordinates, either both set or both empty
    """
    __tablename__ = 'locations'

    id = Column(IdType, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    address = Column(String(255))
    city = Column(String(120), nullable=False, index=True)
    province = Column(String(120))
    postal_code = Column(String(20))
    latitude = Column(Float)
    longitude = Column(Float)
    created_at = Column(DateTime, default=now_local)
    updated_at = Column(DateTime, default=now_local, onupdate=now_local)

    def __init__(self, **kwargs):
        """Initialize Location, rejecting half-specified coordinates."""
        check_coordinates(kwargs.get('latitude'), kwargs.get('longitude'))
        super().__init__(**kwargs)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def full_address(self) -> str:
        """Address, city, province and postal code joined, skipping empty parts."""
        result = ''
        for part, separator in ((self.address, ''), (self.city, ', '), (self.province, ', '), (self.postal_code, ' ')):
            if part:
                result += (separator if result else '') + part
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'address': self.address,
            'city': self.city,
            'province': self.province,
            'postalCode': self.postal_code,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'fullAddress': self.full_address,
            'hasCoordinates': self.has_coordinates,
        }

    def __str__(self) -> str:
        return f"Location(id={self.id}, name={self.name}, city={self.city})"


def check_coordinates(latitude, longitude) -> None:
    """Coordinates are all-or-nothing."""
    if (latitude is None) != (longitude is None):
        raise ValidationFailed("Latitude and longitude must be provided together")
