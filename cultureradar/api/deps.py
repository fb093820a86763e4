"""Request dependencies: resolving the bearer token to an actor."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..errors import Unauthorized
from ..services.access_policy import Actor
from ..services.auth_provider import actor_from_token

# auto_error=False so missing credentials surface as our own 401
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Actor:
    if credentials is None:
        raise Unauthorized("Not authenticated")
    return actor_from_token(credentials.credentials)
