"""Event store: filtered, paginated queries and record writes."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from sqlalchemy import and_, func, or_, select, exists
from sqlalchemy.orm import Session, contains_eager

from ..errors import ValidationFailed
from ..models import Event, EventCategory, Location

logger = logging.getLogger(__name__)

# Public sort keys -> sortable columns
SORT_FIELDS = {
    'id': Event.id,
    'name': Event.name,
    'startTime': Event.start_time,
    'endTime': Event.end_time,
    'price': Event.price,
    'isFree': Event.is_free,
    'category': Event.category,
    'createdAt': Event.created_at,
    'updatedAt': Event.updated_at,
}

# Attributes copied from a payload by update()
UPDATABLE_FIELDS = (
    'name', 'description', 'start_time', 'end_time', 'location',
    'category', 'price', 'is_free', 'image_url',
)


@dataclass
class Page:
    """One page of results plus the metadata needed to page through the rest."""
    content: List[Any]
    total_elements: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return (self.total_elements + self.size - 1) // self.size

    def to_dict(self, serialize: Callable[[Any], Dict[str, Any]]) -> Dict[str, Any]:
        return {
            'content': [serialize(item) for item in self.content],
            'totalElements': self.total_elements,
            'totalPages': self.total_pages,
            'page': self.page,
            'size': self.size,
        }


def _free_condition(is_free: bool):
    free = or_(Event.is_free.is_(True), and_(Event.price.isnot(None), Event.price <= 0))
    if is_free:
        return free
    return and_(Event.is_free.is_(False), or_(Event.price.is_(None), Event.price > 0))


def build_conditions(
    city: Optional[str] = None,
    is_free: Optional[bool] = None,
    category: Optional[EventCategory] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    approved: Optional[bool] = None,
    end_inclusive: bool = True,
) -> list:
    """Translate the optional filters into SQL conditions (combined with AND)."""
    conditions = []
    if city is not None and city.strip():
        conditions.append(func.lower(Location.city) == city.strip().lower())
    if is_free is not None:
        conditions.append(_free_condition(is_free))
    if category is not None:
        conditions.append(Event.category == category)
    if start_date is not None:
        conditions.append(Event.start_time >= start_date)
    if end_date is not None:
        conditions.append(Event.start_time <= end_date if end_inclusive else Event.start_time < end_date)
    if approved is not None:
        conditions.append(Event.approved.is_(approved))
    return conditions


def find_events(
    session: Session,
    city: Optional[str] = None,
    is_free: Optional[bool] = None,
    category: Optional[EventCategory] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    approved: Optional[bool] = None,
    page: int = 0,
    size: int = 10,
    sort_field: str = 'startTime',
    sort_dir: str = 'asc',
    end_inclusive: bool = True,
) -> Page:
    """
    Query events matching every supplied filter.

    Args:
        city: Case-insensitive match on the location's city
        is_free: True for free events (marked free or price <= 0), False for paid ones
        category: Event category
        start_date / end_date: Bounds on the event's start time; either may be open
        approved: Publication state
        page: Zero-based page index
        size: Page size
        sort_field: One of SORT_FIELDS
        sort_dir: 'asc' or 'desc'; ties are always broken by ascending id
        end_inclusive: Whether end_date itself is inside the range

    Raises:
        ValidationFailed: If the sort field is unknown or paging values are negative
    """
    sort_column = SORT_FIELDS.get(sort_field)
    if sort_column is None:
        raise ValidationFailed(
            f"Unknown sort field '{sort_field}'. Expected one of: {', '.join(SORT_FIELDS)}"
        )
    if page < 0 or size <= 0:
        raise ValidationFailed("Page must be >= 0 and size must be > 0")

    conditions = build_conditions(city, is_free, category, start_date, end_date, approved, end_inclusive)

    count_stmt = select(func.count(Event.id)).select_from(Event).join(Event.location).where(*conditions)
    total = session.execute(count_stmt).scalar_one()

    order = sort_column.desc() if sort_dir == 'desc' else sort_column.asc()
    stmt = (
        select(Event)
        .join(Event.location)
        .options(contains_eager(Event.location))
        .where(*conditions)
        .order_by(order, Event.id.asc())
        .offset(page * size)
        .limit(size)
    )
    content = list(session.execute(stmt).scalars().all())

    return Page(content=content, total_elements=total, page=page, size=size)


def find_by_id(session: Session, event_id: int, for_update: bool = False) -> Optional[Event]:
    """Load one event with its location; optionally lock the row."""
    stmt = select(Event).where(Event.id == event_id)
    if for_update:
        stmt = stmt.with_for_update(of=Event)
    return session.execute(stmt).scalars().first()


def find_by_ids(session: Session, event_ids: Iterable[int], for_update: bool = False) -> List[Event]:
    """Load the events that exist among the given ids, in ascending id order."""
    ids = list(event_ids)
    if not ids:
        return []
    stmt = select(Event).where(Event.id.in_(ids)).order_by(Event.id.asc())
    if for_update:
        stmt = stmt.with_for_update(of=Event)
    return list(session.execute(stmt).scalars().all())


def create(session: Session, event: Event) -> Event:
    """Insert an event; the id and timestamps are assigned on flush."""
    if event.approved is None:
        event.approved = False
    if event.is_free is None:
        event.is_free = False
    session.add(event)
    session.flush()
    return event


def update(session: Session, event: Event, values: Dict[str, Any]) -> Event:
    """
    Replace the updatable attributes of an event.

    Identity, creator, provenance and approval state are never touched here;
    attributes missing from values are cleared.
    """
    for name in UPDATABLE_FIELDS:
        setattr(event, name, values.get(name))
    if event.is_free is None:
        event.is_free = False
    session.flush()
    return event


def delete(session: Session, event: Event) -> None:
    session.delete(event)
    session.flush()


def exists_by_external_id_and_source(session: Session, external_id: str, external_source: str) -> bool:
    stmt = select(exists().where(
        Event.external_id == external_id,
        Event.external_source == external_source,
    ))
    return bool(session.execute(stmt).scalar())
