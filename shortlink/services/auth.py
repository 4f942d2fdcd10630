"""Password hashing and the request authentication guard.

A request resolves to a ``Principal`` in two stages: the signed session cookie
names a user, and the user row decides between USER and ADMIN. Routes declare
what they need through ``require_user`` / ``require_admin``; anything less is
answered with ``UnauthorizedError`` before the route body runs.
"""
from functools import lru_cache
import logging

from fastapi import Depends, Request
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from shortlink.core.exceptions import InvalidCredentialsError, UnauthorizedError
from shortlink.db import repository
from shortlink.db.Connection import database
from shortlink.schemas.UserRecord import Principal, PrincipalKind, UserRecord

logger = logging.getLogger(__name__)

# argon2 salts every hash with fresh random bytes
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

SESSION_USER_ID = "user_id"
SESSION_USERNAME = "username"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # unrecognised or corrupt hash
        logger.warning("Stored password hash could not be verified")
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("dummy-password-for-timing")


def authenticate(db: Session, username: str, password: str) -> UserRecord:
    """Check a username/password pair. Unknown user and wrong password fail identically."""
    user = repository.find_user(db, username=username)
    if user is None:
        # keep the timing close to the wrong-password path
        verify_password(password, _dummy_hash())
        logger.info(f"Login failed for username={username!r}")
        raise InvalidCredentialsError()
    if not verify_password(password, user.password):
        logger.info(f"Login failed for username={username!r}")
        raise InvalidCredentialsError()
    return user


def create_user(db: Session, username: str, password: str, is_admin: bool = False) -> UserRecord:
    user = repository.create_user(db, username, hash_password(password), is_admin)
    logger.info(f"Created user {username!r} (admin={is_admin})")
    return user


def login(request: Request, db: Session, username: str, password: str) -> UserRecord:
    user = authenticate(db, username, password)
    request.session.clear()
    request.session[SESSION_USER_ID] = user.id
    request.session[SESSION_USERNAME] = user.username
    logger.info(f"User {user.username!r} logged in")
    return user


def logout(request: Request) -> None:
    request.session.clear()


def resolve_principal(request: Request, db: Session) -> Principal:
    user_id = request.session.get(SESSION_USER_ID)
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        return Principal()

    user = repository.find_user(db, user_id=user_id)
    if user is None or user.username != request.session.get(SESSION_USERNAME):
        # user removed or renamed since the cookie was issued
        return Principal()

    kind = PrincipalKind.ADMIN if user.is_admin else PrincipalKind.USER
    return Principal(kind=kind, user=user)


def get_principal(request: Request, db: Session = Depends(database.get_db)) -> Principal:
    return resolve_principal(request, db)


def require_user(principal: Principal = Depends(get_principal)) -> UserRecord:
    if not principal.is_authenticated:
        raise UnauthorizedError()
    return principal.user


def admin_guard(message: str = UnauthorizedError.message):
    """Build a dependency that only lets admins through, failing with ``message``."""

    def require_admin(principal: Principal = Depends(get_principal)) -> UserRecord:
        # ADMIN is only ever resolved from an existing user row
        if not principal.is_admin:
            raise UnauthorizedError(message)
        return principal.user

    return require_admin


require_admin = admin_guard()
