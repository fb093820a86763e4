"""Request bodies for the JSON API.

Clients send camelCase keys; every model also accepts the snake_case field
names. Business validation (required fields, categories, date order) happens
in the services so that it answers with the same errors for every caller.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..utils.timezone import to_local_naive


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LocationPayload(CamelModel):
    id: Optional[int] = None
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def to_values(self) -> Dict[str, Any]:
        return self.model_dump()


class EventPayload(CamelModel):
    """A submitted or edited event; the venue is given by locationId or inline."""
    name: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    image_url: Optional[str] = None
    price: Optional[float] = None
    is_free: Optional[bool] = None
    category: Optional[str] = None
    location_id: Optional[int] = None
    location: Optional[LocationPayload] = None
    approved: Optional[bool] = None

    def to_values(self) -> Dict[str, Any]:
        values = self.model_dump(exclude={'location'})
        values['start_time'] = to_local_naive(self.start_time)
        values['end_time'] = to_local_naive(self.end_time)
        if isinstance(values['category'], str):
            values['category'] = values['category'].strip().upper()
        values['location'] = self.location.to_values() if self.location else None
        return values


class LoginRequest(CamelModel):
    username: str
    password: str


class RegisterRequest(CamelModel):
    username: str
    email: str
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None


class ProfileUpdate(CamelModel):
    """Partial update; only the keys present in the body are changed."""
    username: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None

    def to_values(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class AdminUserUpdate(ProfileUpdate):
    roles: Optional[List[str]] = None
    enabled: Optional[bool] = None


class PasswordChangeRequest(CamelModel):
    current_password: str
    new_password: str
