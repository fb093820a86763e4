"""Locations router module."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status

from ...db import db
from ...errors import NotFound
from ...services.access_policy import Actor, Operation, require
from ...stores import location_store
from ..deps import get_current_actor
from ..schemas import LocationPayload

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("/public")
def list_locations(city: Optional[str] = None) -> List[Dict[str, Any]]:
    with db.session() as session:
        return [location.to_dict() for location in location_store.list_locations(session, city)]


@router.get("/public/{location_id}")
def get_location(location_id: int) -> Dict[str, Any]:
    with db.session() as session:
        location = location_store.find_by_id(session, location_id)
        if location is None:
            raise NotFound(f"Location {location_id} not found")
        return location.to_dict()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_location(payload: LocationPayload, actor: Actor = Depends(get_current_actor)) -> Dict[str, Any]:
    require(Operation.MANAGE_LOCATIONS, actor)
    with db.session() as session:
        return location_store.create(session, payload.to_values()).to_dict()


@router.put("/{location_id}")
def update_location(
    location_id: int,
    payload: LocationPayload,
    actor: Actor = Depends(get_current_actor),
) -> Dict[str, Any]:
    require(Operation.MANAGE_LOCATIONS, actor)
    with db.session() as session:
        location = location_store.find_by_id(session, location_id)
        if location is None:
            raise NotFound(f"Location {location_id} not found")
        return location_store.update(session, location, payload.to_values()).to_dict()
