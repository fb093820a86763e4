"""User model definition."""

import enum
from typing import Dict, Any, List
from sqlalchemy import Column, String, Boolean, DateTime, JSON

from .base import Base, IdType
from ..utils.timezone import now_local


class Role(str, enum.Enum):
    USER = 'USER'
    MODERATOR = 'MODERATOR'
    ADMIN = 'ADMIN'


class User(Base):
    """
    An account that can submit, curate or administer events.

    The password is stored only as an opaque hash produced by the auth provider.
    """
    __tablename__ = 'users'

    id = Column(IdType, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100))
    last_name = Column(String(100))
    roles = Column(JSON, nullable=False, default=lambda: [Role.USER.value])
    city = Column(String(120))
    province = Column(String(120))
    enabled = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=now_local)
    updated_at = Column(DateTime, default=now_local, onupdate=now_local)
    last_login_at = Column(DateTime)

    @property
    def role_set(self) -> List[str]:
        return list(self.roles or [])

    def has_role(self, role: Role) -> bool:
        return role.value in self.role_set

    @property
    def full_name(self) -> str:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        if self.first_name:
            return self.first_name
        return self.username

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, never exposing the credential."""
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'fullName': self.full_name,
            'roles': sorted(self.role_set),
            'city': self.city,
            'province': self.province,
            'enabled': bool(self.enabled),
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
            'lastLoginAt': self.last_login_at.isoformat() if self.last_login_at else None,
        }

    def __str__(self) -> str:
        return f"User(id={self.id}, username={self.username}, roles={self.role_set})"
