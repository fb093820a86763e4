"""User profile and user administration routes."""

from fastapi import APIRouter, Depends, Response, status

from ...services import user_service
from ...services.access_policy import Actor
from ..deps import get_current_actor
from ..schemas import AdminUserUpdate, PasswordChangeRequest, ProfileUpdate

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile")
def get_profile(actor: Actor = Depends(get_current_actor)):
    return user_service.get_profile(actor).to_dict()


@router.put("/profile")
def update_profile(payload: ProfileUpdate, actor: Actor = Depends(get_current_actor)):
    return user_service.update_profile(actor, payload.to_values()).to_dict()


@router.delete("/profile", status_code=status.HTTP_204_NO_CONTENT)
def delete_profile(actor: Actor = Depends(get_current_actor)):
    user_service.delete_own_account(actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/profile/password")
def change_password(payload: PasswordChangeRequest, actor: Actor = Depends(get_current_actor)):
    user_service.change_password(actor, payload.current_password, payload.new_password)
    return {"message": "Password changed"}


@router.get("/admin")
def list_users(actor: Actor = Depends(get_current_actor)):
    return [user.to_dict() for user in user_service.list_users(actor)]


@router.get("/admin/{user_id}")
def get_user(user_id: int, actor: Actor = Depends(get_current_actor)):
    return user_service.get_user(actor, user_id).to_dict()


@router.put("/admin/{user_id}")
def update_user(user_id: int, payload: AdminUserUpdate, actor: Actor = Depends(get_current_actor)):
    return user_service.admin_update_user(actor, user_id, payload.to_values()).to_dict()


@router.delete("/admin/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, actor: Actor = Depends(get_current_actor)):
    user_service.admin_delete_user(actor, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
