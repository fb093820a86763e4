"""Event submission and approval workflow.

An event is either PENDING (approved=False) or APPROVED (approved=True).
Submissions start PENDING unless an ADMIN publishes them directly; curators
move them to APPROVED in bulk. Deletion is separate and ADMIN-only.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from ..config.search import PENDING_APPROVAL_LIMIT
from ..db import db
from ..errors import NotFound, ValidationFailed
from ..models import Event, EventCategory, Location
from ..stores import event_store, location_store
from .access_policy import Actor, Operation, require

logger = logging.getLogger(__name__)


def _validate(values: Dict[str, Any]) -> None:
    if not (values.get('name') or '').strip():
        raise ValidationFailed("Event name is required")
    if values.get('start_time') is None:
        raise ValidationFailed("Start time is required")
    if values.get('category') is None:
        raise ValidationFailed("Category is required")
    if not isinstance(values['category'], EventCategory):
        try:
            values['category'] = EventCategory(values['category'])
        except ValueError as e:
            raise ValidationFailed(f"Unknown category: {values['category']}") from e
    end_time = values.get('end_time')
    if end_time is not None and end_time < values['start_time']:
        raise ValidationFailed("End time must not be before start time")


def _resolve_location(session: Session, values: Dict[str, Any]) -> Location:
    """
    Find the referenced location or create the inline one.

    The new location is flushed in the caller's transaction, so it is rolled
    back together with the event if anything later fails.
    """
    location_id = values.get('location_id')
    if location_id is not None:
        location = location_store.find_by_id(session, location_id)
        if location is None:
            raise ValidationFailed(f"Location {location_id} does not exist")
        return location

    location_values = values.get('location')
    if location_values:
        if location_values.get('id') is not None:
            return _resolve_location(session, {'location_id': location_values['id']})
        return location_store.create(session, location_values)

    raise ValidationFailed("Location is required")


def get_event(event_id: int) -> Event:
    """
    Raises:
        NotFound: If no event has this id
    """
    with db.session() as session:
        event = event_store.find_by_id(session, event_id)
        if event is None:
            raise NotFound(f"Event {event_id} not found")
        return event


def create_event(values: Dict[str, Any], actor: Actor) -> Event:
    """
    Submit a new event on behalf of actor.

    Only an ADMIN may publish directly; everybody else starts PENDING.
    Manual events never carry external provenance.
    """
    require(Operation.CREATE_EVENT, actor)
    _validate(values)

    with db.session() as session:
        event = Event(
            name=values['name'].strip(),
            description=values.get('description'),
            start_time=values['start_time'],
            end_time=values.get('end_time'),
            image_url=values.get('image_url'),
            price=values.get('price'),
            is_free=bool(values.get('is_free')),
            category=values['category'],
            location=_resolve_location(session, values),
            approved=bool(values.get('approved')) if actor.is_admin else False,
            creator_id=actor.id,
            external_id=None,
            external_source=None,
        )
        event_store.create(session, event)
        logger.info(f"Event {event.id} submitted by {actor.username} (approved={event.approved})")
        return event


def update_event(event_id: int, values: Dict[str, Any], actor: Actor) -> Event:
    """
    Replace the editable fields of an event.

    Approval state, identity, creator and provenance are left as they are.

    Raises:
        NotFound: If no event has this id
        Forbidden: If event ownership is enforced and actor is neither creator nor ADMIN
    """
    with db.session() as session:
        event = event_store.find_by_id(session, event_id, for_update=True)
        if event is None:
            raise NotFound(f"Event {event_id} not found")
        require(Operation.UPDATE_EVENT, actor, resource_owner_id=event.creator_id)
        _validate(values)

        updated = dict(values)
        updated['name'] = values['name'].strip()
        updated['location'] = _resolve_location(session, values)
        event_store.update(session, event, updated)
        logger.info(f"Event {event.id} updated by {actor.username}")
        return event


def delete_event(event_id: int, actor: Actor) -> None:
    """
    Raises:
        NotFound: If no event has this id
    """
    require(Operation.DELETE_EVENT, actor)

    with db.session() as session:
        event = event_store.find_by_id(session, event_id, for_update=True)
        if event is None:
            raise NotFound(f"Event {event_id} not found")
        event_store.delete(session, event)
        logger.info(f"Event {event_id} deleted by {actor.username}")


def approve(event_ids: Iterable[int], actor: Optional[Actor] = None) -> List[Event]:
    """
    Approve every existing event among event_ids.

    Unknown ids are skipped without error. Approving an approved event is a
    no-op that still reports the event. Returns the events in request order,
    each at most once.
    """
    if actor is not None:
        require(Operation.APPROVE_EVENTS, actor)

    requested = list(dict.fromkeys(event_ids))
    if not requested:
        return []

    with db.session() as session:
        found = {event.id: event for event in event_store.find_by_ids(session, requested, for_update=True)}
        approved = []
        for event_id in requested:
            event = found.get(event_id)
            if event is None:
                logger.info(f"Skipping approval of unknown event {event_id}")
                continue
            event.approved = True
            approved.append(event)
        session.flush()

    logger.info(f"Approved {len(approved)} of {len(requested)} requested events")
    return approved


def pending_events(limit: int = PENDING_APPROVAL_LIMIT) -> List[Event]:
    """Unapproved events, newest first."""
    with db.session() as session:
        result = event_store.find_events(
            session,
            approved=False,
            page=0,
            size=limit,
            sort_field='id',
            sort_dir='desc',
        )
        return result.content
