"""User directory: account lookups and writes."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select, update as sql_update
from sqlalchemy.orm import Session

from ..models import Event, User

logger = logging.getLogger(__name__)

# Profile attributes a user (or an admin) may change
PROFILE_FIELDS = ('email', 'first_name', 'last_name', 'city', 'province')


def by_id(session: Session, user_id: int) -> Optional[User]:
    return session.get(User, user_id)


def by_username(session: Session, username: str) -> Optional[User]:
    stmt = select(User).where(User.username == username)
    return session.execute(stmt).scalars().first()


def exists_by_username(session: Session, username: str) -> bool:
    return by_username(session, username) is not None


def exists_by_email(session: Session, email: str, exclude_user_id: Optional[int] = None) -> bool:
    stmt = select(User.id).where(func.lower(User.email) == email.strip().lower())
    if exclude_user_id is not None:
        stmt = stmt.where(User.id != exclude_user_id)
    return session.execute(stmt).first() is not None


def list_all(session: Session) -> List[User]:
    return list(session.execute(select(User).order_by(User.id.asc())).scalars().all())


def create(session: Session, user: User) -> User:
    session.add(user)
    session.flush()
    logger.info(f"Created user: {user}")
    return user


def update(session: Session, user: User, values: Dict[str, Any]) -> User:
    """Copy the profile attributes present in values onto the user."""
    for name in PROFILE_FIELDS:
        if name in values:
            setattr(user, name, values[name])
    session.flush()
    return user


def delete(session: Session, user: User) -> None:
    """Delete a user; events they created stay, without a creator."""
    session.execute(
        sql_update(Event).where(Event.creator_id == user.id).values(creator_id=None)
    )
    session.delete(user)
    session.flush()
    logger.info(f"Deleted user: {user}")
