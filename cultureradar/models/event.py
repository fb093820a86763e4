"""Event model definition."""

import enum
from datetime import datetime, timedelta
from typing import Dict, Any, Optional
from sqlalchemy import (
    Column, String, Text, DateTime, Float, Boolean, Enum, ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import relationship

from .base import Base, IdType
from ..config.search import DEFAULT_EVENT_DURATION_HOURS
from ..utils.timezone import now_local


class EventCategory(str, enum.Enum):
    """Fixed set of event categories."""
    MUSIC = 'MUSIC'
    THEATRE = 'THEATRE'
    DANCE = 'DANCE'
    FILM = 'FILM'
    ART = 'ART'
    EXHIBITION = 'EXHIBITION'
    MUSEUM = 'MUSEUM'
    FESTIVAL = 'FESTIVAL'
    LITERATURE = 'LITERATURE'
    COMEDY = 'COMEDY'
    HERITAGE = 'HERITAGE'
    WORKSHOP = 'WORKSHOP'
    OTHER = 'OTHER'


class Event(Base):
    """
    Event model representing a cultural event, submitted by a user or
    ingested from an external source.

    Fields:
        id: Unique identifier
        name: Event name (required)
        description: Event description
        start_time: When the event starts (required)
        end_time: When the event ends (optional)
        image_url: URL of the event's image
        price: Ticket price (optional)
        is_free: Whether the event is marked free
        category: One of EventCategory
        location_id / location: Venue (required reference)
        approved: Whether the event is visible in public search
        creator_id / creator: User who submitted the event (optional reference)
        external_id / external_source: Provenance of ingested events, both null for manual ones
        created_at / updated_at: Server-assigned timestamps
    """
    __tablename__ = 'events'
    __table_args__ = (
        UniqueConstraint('external_id', 'external_source', name='uq_events_external_id_source'),
    )

    id = Column(IdType, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime)
    image_url = Column(String(1024))
    price = Column(Float)
    is_free = Column(Boolean, nullable=False, default=False)
    category = Column(Enum(EventCategory, native_enum=False, length=32), nullable=False, index=True)
    approved = Column(Boolean, nullable=False, default=False, index=True)
    external_id = Column(String(255))
    external_source = Column(String(64))
    created_at = Column(DateTime, default=now_local)
    updated_at = Column(DateTime, default=now_local, onupdate=now_local)

    location_id = Column(IdType, ForeignKey('locations.id'), nullable=False)
    creator_id = Column(IdType, ForeignKey('users.id', ondelete='SET NULL'))

    # The venue is always loaded with the event; the creator never is
    location = relationship('Location', lazy='joined', innerjoin=True)
    creator = relationship('User', lazy='raise_on_sql')

    @property
    def is_free_event(self) -> bool:
        """Free when marked free, or when the price is zero or less."""
        return bool(self.is_free) or (self.price is not None and self.price <= 0)

    @property
    def effective_end_time(self) -> datetime:
        """End time, or start time plus the default duration when none is set."""
        if self.end_time is not None:
            return self.end_time
        return self.start_time + timedelta(hours=DEFAULT_EVENT_DURATION_HOURS)

    def is_happening_now(self, now: Optional[datetime] = None) -> bool:
        now = now or now_local()
        return self.start_time <= now < self.effective_end_time

    def is_past(self, now: Optional[datetime] = None) -> bool:
        now = now or now_local()
        return now >= self.effective_end_time

    @property
    def formatted_date(self) -> str:
        if self.start_time is None:
            return ''
        formatted = self.start_time.date().isoformat()
        if self.end_time is not None and self.end_time.date() != self.start_time.date():
            formatted += f" - {self.end_time.date().isoformat()}"
        return formatted

    @property
    def formatted_time(self) -> str:
        if self.start_time is None:
            return ''
        formatted = self.start_time.time().isoformat(timespec='minutes')
        if self.end_time is not None:
            formatted += f" - {self.end_time.time().isoformat(timespec='minutes')}"
        return formatted

    def to_dict(self, distance_km: Optional[float] = None, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Convert to dictionary; the location must already be loaded."""
        now = now or now_local()
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'startTime': self.start_time.isoformat() if self.start_time else None,
            'endTime': self.end_time.isoformat() if self.end_time else None,
            'imageUrl': self.image_url,
            'price': self.price,
            'isFree': bool(self.is_free),
            'isFreeEvent': self.is_free_event,
            'category': self.category.value if self.category else None,
            'location': self.location.to_dict() if self.location else None,
            'approved': bool(self.approved),
            'externalId': self.external_id,
            'externalSource': self.external_source,
            'creatorId': self.creator_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
            'isHappeningNow': self.is_happening_now(now),
            'isPast': self.is_past(now),
            'formattedDate': self.formatted_date,
            'formattedTime': self.formatted_time,
            'distanceKm': distance_km,
        }

    def __str__(self) -> str:
        return f"Event(id={self.id}, name={self.name}, start_time={self.start_time}, approved={self.approved})"
