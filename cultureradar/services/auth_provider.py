"""Authentication: credentials, registration and bearer tokens.

Passwords are stored as salted PBKDF2 hashes; tokens are HS256 JWTs that
carry the username, user id and roles.
"""

import base64
import hashlib
import hmac
import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from ..config.security import AuthConfig, BootstrapAdminConfig, get_auth_config
from ..db import db, DuplicateRecordError
from ..errors import Conflict, Unauthorized, ValidationFailed
from ..models import Role, User
from ..stores import user_store
from ..utils.timezone import now_local
from .access_policy import Actor

logger = logging.getLogger(__name__)

HASH_ALGORITHM = 'pbkdf2_sha256'
HASH_ITERATIONS = 260000
MIN_PASSWORD_LENGTH = 8


def hash_password(password: str, iterations: int = HASH_ITERATIONS) -> str:
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt, iterations)
    return '$'.join([
        HASH_ALGORITHM,
        str(iterations),
        base64.b64encode(salt).decode('ascii'),
        base64.b64encode(digest).decode('ascii'),
    ])


def verify_password(password: str, stored_hash: str) -> bool:
    try:
        algorithm, iterations, salt, expected = stored_hash.split('$')
    except ValueError:
        return False
    if algorithm != HASH_ALGORITHM:
        return False
    digest = hashlib.pbkdf2_hmac(
        'sha256', password.encode('utf-8'), base64.b64decode(salt), int(iterations)
    )
    return hmac.compare_digest(base64.b64encode(digest).decode('ascii'), expected)


def check_password_strength(password: Optional[str]) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


def issue_token(user: User, config: Optional[AuthConfig] = None) -> str:
    """Sign a bearer token for user."""
    config = config or get_auth_config()
    issued_at = datetime.now(timezone.utc)
    claims = {
        'sub': user.username,
        'uid': user.id,
        'roles': sorted(user.role_set),
        'iat': int(issued_at.timestamp()),
        'exp': int((issued_at + timedelta(minutes=config.token_expiration_minutes)).timestamp()),
    }
    return jwt.encode(claims, config.jwt_secret, algorithm=config.jwt_algorithm)


def decode_token(token: str, config: Optional[AuthConfig] = None) -> Dict[str, Any]:
    """
    Raises:
        Unauthorized: If the token is malformed, expired or badly signed
    """
    config = config or get_auth_config()
    try:
        claims = jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
    except JWTError as e:
        raise Unauthorized("Could not validate credentials") from e
    if not claims.get('sub'):
        raise Unauthorized("Could not validate credentials")
    return claims


def validate_token(token: str) -> bool:
    try:
        decode_token(token)
    except Unauthorized:
        return False
    return True


def strip_bearer(header_value: Optional[str]) -> str:
    value = (header_value or '').strip()
    if value.lower().startswith('bearer '):
        return value[7:].strip()
    return value


def actor_from_token(token: str) -> Actor:
    """
    Resolve a bearer token to the current state of its user.

    Roles come from the user record, not the token, so a demoted or
    disabled account loses access at once.

    Raises:
        Unauthorized: If the token is invalid or the user is gone or disabled
    """
    claims = decode_token(token)
    with db.session() as session:
        user = user_store.by_username(session, claims['sub'])
        if user is None or not user.enabled:
            raise Unauthorized("Could not validate credentials")
        return Actor(id=user.id, username=user.username, roles=frozenset(user.role_set))


def authenticate(username: str, password: str) -> User:
    """
    Check credentials and record the login time.

    Raises:
        Unauthorized: If the credentials do not match an enabled user
    """
    with db.session() as session:
        user = user_store.by_username(session, username)
        if user is None or not user.enabled or not verify_password(password, user.password_hash):
            logger.info(f"Failed login for {username}")
            raise Unauthorized("Invalid username or password")
        user.last_login_at = now_local()
        return user


def register(values: Dict[str, Any], roles: Optional[list] = None) -> User:
    """
    Create a new account (USER role unless roles are given).

    Raises:
        Conflict: If the username or email is already taken
        ValidationFailed: If required fields are missing
    """
    username = (values.get('username') or '').strip()
    email = (values.get('email') or '').strip()
    if not 3 <= len(username) <= 50:
        raise ValidationFailed("Username must be between 3 and 50 characters")
    if not email:
        raise ValidationFailed("Email is required")
    check_password_strength(values.get('password'))

    try:
        with db.session() as session:
            if user_store.exists_by_username(session, username):
                raise Conflict(f"Username {username} is already taken")
            if user_store.exists_by_email(session, email):
                raise Conflict(f"Email {email} is already in use")

            user = User(
                username=username,
                email=email,
                password_hash=hash_password(values['password']),
                first_name=values.get('first_name'),
                last_name=values.get('last_name'),
                city=values.get('city'),
                province=values.get('province'),
                roles=roles or [Role.USER.value],
                enabled=True,
            )
            user_store.create(session, user)
    except DuplicateRecordError as e:
        raise Conflict("Username or email is already in use") from e
    return user


def ensure_bootstrap_admin(config: Optional[BootstrapAdminConfig] = None) -> Optional[User]:
    """Create the configured administrator account if it does not exist yet."""
    config = config or BootstrapAdminConfig()
    if not config.is_configured:
        return None

    with db.session() as session:
        if user_store.exists_by_username(session, config.username):
            return None

    user = register(
        {'username': config.username, 'email': config.email, 'password': config.password},
        roles=[Role.USER.value, Role.ADMIN.value],
    )
    logger.info(f"Created bootstrap administrator {user.username}")
    return user
