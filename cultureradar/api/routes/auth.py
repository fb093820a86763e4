"""Authentication routes: login, registration and token checks."""

from typing import Optional

from fastapi import APIRouter, Depends, Header, status

from ...services import auth_provider, user_service
from ...services.access_policy import Actor
from ..deps import get_current_actor
from ..schemas import LoginRequest, RegisterRequest

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
def login(credentials: LoginRequest):
    """Exchange a username and password for a bearer token."""
    user = auth_provider.authenticate(credentials.username, credentials.password)
    return {
        "token": auth_provider.issue_token(user),
        "tokenType": "Bearer",
        "user": user.to_dict(),
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest):
    return auth_provider.register(request.model_dump()).to_dict()


@router.get("/current-user")
def current_user(actor: Actor = Depends(get_current_actor)):
    return user_service.get_profile(actor).to_dict()


@router.post("/validate-token")
def validate_token(authorization: Optional[str] = Header(None)):
    token = auth_provider.strip_bearer(authorization)
    return {"valid": bool(token) and auth_provider.validate_token(token)}


@router.post("/logout")
def logout():
    """Tokens are stateless; the client simply discards its token."""
    return {"message": "Logout successful"}
