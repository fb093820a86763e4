"""Profile management for the current user and user administration."""

import logging
from typing import Any, Dict, List, Optional

from ..db import db, DuplicateRecordError
from ..errors import Conflict, Forbidden, NotFound, ValidationFailed
from ..models import Role, User
from ..stores import user_store
from .access_policy import Actor, Operation, require
from .auth_provider import check_password_strength, hash_password, verify_password

logger = logging.getLogger(__name__)

VALID_ROLES = {role.value for role in Role}


def _load(session, user_id: int) -> User:
    user = user_store.by_id(session, user_id)
    if user is None:
        raise NotFound(f"User {user_id} not found")
    return user


def _apply_profile(session, user: User, values: Dict[str, Any]) -> None:
    email = values.get('email')
    if email is not None:
        if not email.strip():
            raise ValidationFailed("Email is required")
        if user_store.exists_by_email(session, email, exclude_user_id=user.id):
            raise Conflict(f"Email {email} is already in use")
    user_store.update(session, user, values)


def get_profile(actor: Actor) -> User:
    require(Operation.VIEW_OWN_PROFILE, actor, resource_owner_id=actor.id)
    with db.session() as session:
        return _load(session, actor.id)


def update_profile(actor: Actor, values: Dict[str, Any]) -> User:
    """
    Update the actor's own profile.

    Raises:
        Forbidden: If the payload names a different username
    """
    username = values.get('username')
    if username is not None and username != actor.username:
        raise Forbidden("Users can only update their own profile")
    require(Operation.UPDATE_OWN_PROFILE, actor, resource_owner_id=actor.id)

    try:
        with db.session() as session:
            user = _load(session, actor.id)
            _apply_profile(session, user, values)
    except DuplicateRecordError as e:
        raise Conflict("Email is already in use") from e
    return user


def change_password(actor: Actor, current_password: str, new_password: str) -> None:
    """
    Raises:
        ValidationFailed: If the current password is wrong or the new one too weak
    """
    require(Operation.CHANGE_OWN_PASSWORD, actor, resource_owner_id=actor.id)
    check_password_strength(new_password)

    with db.session() as session:
        user = _load(session, actor.id)
        if not verify_password(current_password or '', user.password_hash):
            raise ValidationFailed("Current password is incorrect")
        user.password_hash = hash_password(new_password)
    logger.info(f"Password changed for {actor.username}")


def delete_own_account(actor: Actor) -> None:
    require(Operation.DELETE_OWN_PROFILE, actor, resource_owner_id=actor.id)
    with db.session() as session:
        user_store.delete(session, _load(session, actor.id))


def list_users(actor: Actor) -> List[User]:
    require(Operation.LIST_USERS, actor)
    with db.session() as session:
        return user_store.list_all(session)


def get_user(actor: Actor, user_id: int) -> User:
    require(Operation.VIEW_USER, actor)
    with db.session() as session:
        return _load(session, user_id)


def admin_update_user(actor: Actor, user_id: int, values: Dict[str, Any]) -> User:
    """Update any user's profile, roles and enabled flag."""
    require(Operation.EDIT_USER, actor)

    roles: Optional[List[str]] = values.get('roles')
    if roles is not None:
        unknown = set(roles) - VALID_ROLES
        if unknown:
            raise ValidationFailed(f"Unknown roles: {', '.join(sorted(unknown))}")

    try:
        with db.session() as session:
            user = _load(session, user_id)
            _apply_profile(session, user, values)
            if roles is not None:
                user.roles = sorted(set(roles))
            if values.get('enabled') is not None:
                user.enabled = bool(values['enabled'])
    except DuplicateRecordError as e:
        raise Conflict("Email is already in use") from e

    logger.info(f"User {user_id} updated by {actor.username}")
    return user


def admin_delete_user(actor: Actor, user_id: int) -> None:
    require(Operation.DELETE_USER, actor)
    with db.session() as session:
        user_store.delete(session, _load(session, user_id))
    logger.info(f"User {user_id} deleted by {actor.username}")
