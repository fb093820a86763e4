"""Events router module."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status

from ...errors import ValidationFailed
from ...models import EventCategory
from ...services import approval_workflow, search_service
from ...services.access_policy import Actor, Operation, require
from ...utils.timezone import to_local_naive
from ..deps import get_current_actor
from ..schemas import EventPayload

router = APIRouter(prefix="/events", tags=["events"])


def _parse_category(value: Optional[str]) -> Optional[EventCategory]:
    if value is None or not value.strip():
        return None
    try:
        return EventCategory(value.strip().upper())
    except ValueError as e:
        raise ValidationFailed(f"Unknown category: {value}") from e


@router.get("/public/search")
def search_events(
    city: Optional[str] = None,
    is_free: Optional[bool] = Query(None, alias="isFree"),
    category: Optional[str] = None,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    page: int = 0,
    size: int = 10,
    sort_by: str = Query("startTime", alias="sortBy"),
    direction: str = "asc",
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> Dict[str, Any]:
    """Search approved events; every filter is optional."""
    criteria = search_service.SearchCriteria(
        city=city,
        is_free=is_free,
        category=_parse_category(category),
        start_date=to_local_naive(start_date),
        end_date=to_local_naive(end_date),
        page=page,
        size=size,
        sort_by=sort_by,
        direction=direction,
    )
    return search_service.search_events(criteria, latitude=latitude, longitude=longitude)


@router.get("/public/upcoming")
def upcoming_events(
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> List[Dict[str, Any]]:
    """Approved events starting within the next seven days."""
    return search_service.upcoming_events(latitude=latitude, longitude=longitude)


@router.get("/public/{event_id}")
def get_event(event_id: int) -> Dict[str, Any]:
    return approval_workflow.get_event(event_id).to_dict()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_event(payload: EventPayload, actor: Actor = Depends(get_current_actor)) -> Dict[str, Any]:
    """Submit an event; it stays pending until approved unless an ADMIN publishes it."""
    return approval_workflow.create_event(payload.to_values(), actor).to_dict()


@router.put("/{event_id}")
def update_event(
    event_id: int,
    payload: EventPayload,
    actor: Actor = Depends(get_current_actor),
) -> Dict[str, Any]:
    return approval_workflow.update_event(event_id, payload.to_values(), actor).to_dict()


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: int, actor: Actor = Depends(get_current_actor)):
    approval_workflow.delete_event(event_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/admin/pending-approval")
def pending_approval(actor: Actor = Depends(get_current_actor)) -> List[Dict[str, Any]]:
    require(Operation.LIST_PENDING, actor)
    return [event.to_dict() for event in approval_workflow.pending_events()]


@router.put("/admin/approve")
def approve_events(
    event_ids: List[int] = Body(...),
    actor: Actor = Depends(get_current_actor),
) -> List[Dict[str, Any]]:
    """Approve the listed events; ids that do not exist are ignored."""
    return [event.to_dict() for event in approval_workflow.approve(event_ids, actor)]
