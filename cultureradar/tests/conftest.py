"""Shared fixtures: an in-memory database per test, users, tokens and an API client."""

import os

# Environment must be set before any project module is imported
os.environ['ENVIRONMENT'] = 'development'
os.environ['INGESTION_ENABLED'] = 'false'
os.environ['ENFORCE_EVENT_OWNERSHIP'] = 'false'
os.environ['JWT_SECRET'] = 'test-secret'
os.environ['APP_TIMEZONE'] = 'America/Toronto'
for name in ('ADMIN_USERNAME', 'ADMIN_EMAIL', 'ADMIN_PASSWORD'):
    os.environ.pop(name, None)

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from cultureradar.api.app import app
from cultureradar.db import db, DatabaseConfig
from cultureradar.models import Event, EventCategory, Location, Role, User
from cultureradar.services.access_policy import Actor
from cultureradar.services.auth_provider import hash_password, issue_token

PASSWORD = 'password123'


@pytest.fixture(autouse=True)
def database():
    """Fresh schema in an in-memory SQLite database for every test."""
    db.configure(DatabaseConfig(url='sqlite://'))
    db.init_db()
    yield db
    db.drop_all()


@pytest.fixture
def client():
    return TestClient(app)


def make_user(username: str, roles=None, password: str = PASSWORD, enabled: bool = True) -> User:
    with db.session() as session:
        user = User(
            username=username,
            email=f"{username}@example.com",
            # Few iterations keep the suite fast; verify_password reads them from the hash
            password_hash=hash_password(password, iterations=1000),
            roles=roles or [Role.USER.value],
            enabled=enabled,
        )
        session.add(user)
    return user


def actor_for(user: User) -> Actor:
    return Actor(id=user.id, username=user.username, roles=frozenset(user.role_set))


def auth_header(user: User) -> dict:
    return {'Authorization': f"Bearer {issue_token(user)}"}


@pytest.fixture
def user():
    return make_user('alice')


@pytest.fixture
def admin():
    return make_user('admin', roles=[Role.USER.value, Role.ADMIN.value])


@pytest.fixture
def moderator():
    return make_user('moderator', roles=[Role.USER.value, Role.MODERATOR.value])


def make_location(name='Massey Hall', city='Toronto', latitude=None, longitude=None, **kwargs) -> Location:
    with db.session() as session:
        location = Location(name=name, city=city, latitude=latitude, longitude=longitude, **kwargs)
        session.add(location)
    return location


def make_event(location: Location, name='Concert', start_time=None, end_time=None,
               approved=True, category=EventCategory.MUSIC, price=None, is_free=False, **kwargs) -> Event:
    with db.session() as session:
        event = Event(
            name=name,
            start_time=start_time or datetime(2030, 6, 1, 20, 0),
            end_time=end_time,
            approved=approved,
            category=category,
            price=price,
            is_free=is_free,
            location_id=location.id,
            **kwargs
        )
        session.add(event)
        session.flush()
        # Load the venue while the session is open
        event.location
    return event


@pytest.fixture
def toronto():
    return make_location('Massey Hall', 'Toronto', latitude=43.6540, longitude=-79.3790)


@pytest.fixture
def montreal():
    return make_location('Place des Arts', 'Montreal', latitude=45.5080, longitude=-73.5670)
