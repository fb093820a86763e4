"""Location store: venue lookups and writes."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..errors import ValidationFailed
from ..models import Location
from ..models.location import check_coordinates

logger = logging.getLogger(__name__)

# Attributes that may be written from a payload
LOCATION_FIELDS = ('name', 'address', 'city', 'province', 'postal_code', 'latitude', 'longitude')


def find_by_id(session: Session, location_id: int) -> Optional[Location]:
    return session.get(Location, location_id)


def list_locations(session: Session, city: Optional[str] = None) -> List[Location]:
    stmt = select(Location)
    if city:
        stmt = stmt.where(func.lower(Location.city) == city.strip().lower())
    stmt = stmt.order_by(Location.name.asc(), Location.id.asc())
    return list(session.execute(stmt).scalars().all())


def _validate(data: Dict[str, Any]) -> None:
    if not (data.get('name') or '').strip():
        raise ValidationFailed("Location name is required")
    if not (data.get('city') or '').strip():
        raise ValidationFailed("Location city is required")
    check_coordinates(data.get('latitude'), data.get('longitude'))


def create(session: Session, data: Dict[str, Any]) -> Location:
    """Insert a new location; the id is assigned on flush."""
    _validate(data)
    location = Location(**{field: data.get(field) for field in LOCATION_FIELDS})
    session.add(location)
    session.flush()
    logger.info(f"Created location: {location}")
    return location


def update(session: Session, location: Location, data: Dict[str, Any]) -> Location:
    """Replace every writable attribute of a location."""
    _validate(data)
    for field in LOCATION_FIELDS:
        setattr(location, field, data.get(field))
    session.flush()
    return location


def find_or_create(session: Session, data: Dict[str, Any]) -> Location:
    """
    Reuse a location with the same name and city (case-insensitive), or create one.

    Used by ingestion, where the same venue shows up in many listings.
    """
    _validate(data)
    stmt = select(Location).where(
        func.lower(Location.name) == data['name'].strip().lower(),
        func.lower(Location.city) == data['city'].strip().lower(),
    ).order_by(Location.id.asc()).limit(1)
    existing = session.execute(stmt).scalars().first()
    if existing is not None:
        return existing
    return create(session, data)
