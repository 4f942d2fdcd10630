from contextlib import contextmanager
from typing import List, Optional
import logging
import time

from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.orm import Session

from shortlink.core.exceptions import (
    InsertFailedError,
    MalformedRowError,
    NotFoundError,
    QueryFailedError,
    StoreUnavailableError,
)
from shortlink.db.Models.models import NEVER_EXPIRES, Share, User
from shortlink.schemas.ShareRecord import ShareRecord
from shortlink.schemas.UserRecord import UserRecord

logger = logging.getLogger(__name__)

# ids are signed 64-bit in the store
MAX_ID = 2**63 - 1


def get_time_seconds() -> int:
    return int(time.time())


class Search:
    """A criterion resolving to at most one share: by id, by url or by token."""

    ID = "id"
    URL = "url"
    TOKEN = "token"

    def __init__(self, field: str, value):
        if field == Search.ID:
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_ID:
                raise QueryFailedError(f"malformed id criterion: {value!r}")
        elif field in (Search.URL, Search.TOKEN):
            if not isinstance(value, str):
                raise QueryFailedError(f"malformed {field} criterion: {value!r}")
        else:
            raise QueryFailedError(f"unknown search field: {field!r}")
        self.field = field
        self.value = value

    @classmethod
    def by_id(cls, share_id: int) -> "Search":
        return cls(cls.ID, share_id)

    @classmethod
    def by_url(cls, url: str) -> "Search":
        return cls(cls.URL, url)

    @classmethod
    def by_token(cls, token: str) -> "Search":
        return cls(cls.TOKEN, token)

    def clause(self):
        return getattr(Share, self.field) == self.value

    def __repr__(self):
        return f"Search({self.field}={self.value!r})"


@contextmanager
def _store_errors(db: Session, action: str, insert: bool = False):
    """Translate SQLAlchemy failures into repository errors, rolling back first."""
    try:
        yield
    except (PoolTimeoutError, OperationalError, DisconnectionError) as e:
        db.rollback()
        logger.error(f"Store unavailable during {action}: {e}")
        raise StoreUnavailableError() from e
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"IntegrityError during {action}: {e}")
        if insert:
            raise InsertFailedError() from e
        raise QueryFailedError() from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Query failed during {action}: {e}")
        raise QueryFailedError() from e
    except Exception:
        db.rollback()
        raise


def share_from_row(row: Share) -> ShareRecord:
    try:
        return ShareRecord.model_validate(row)
    except ValidationError as e:
        raise MalformedRowError(f"share row {getattr(row, 'id', None)} is malformed: {e}") from e


def user_from_row(row: User) -> UserRecord:
    try:
        return UserRecord.model_validate(row)
    except ValidationError as e:
        # the message must not include the stored hash
        raise MalformedRowError(f"user row {getattr(row, 'id', None)} is malformed") from e


# --- shares ---

def create_share(db: Session, url: str, exp: Optional[int] = None) -> ShareRecord:
    if not url:
        raise InsertFailedError("destination url must not be empty")
    db_share = Share(
        url=url,
        exp=NEVER_EXPIRES if exp is None else exp,
        crt=get_time_seconds(),
        expired=False,
        token=None,
    )
    with _store_errors(db, "create_share", insert=True):
        db.add(db_share)
        db.commit()
        db.refresh(db_share)
    return share_from_row(db_share)


def find_share(db: Session, search: Search) -> Optional[ShareRecord]:
    """First share matching ``search``, or None. Only id and token are expected to be unique."""
    with _store_errors(db, f"find_share {search!r}"):
        row = db.query(Share).filter(search.clause()).order_by(Share.id).first()
    if row is None:
        return None
    return share_from_row(row)


def get_share(db: Session, search: Search) -> ShareRecord:
    share = find_share(db, search)
    if share is None:
        raise NotFoundError()
    return share


def update_share(db: Session, search: Search, new_share: ShareRecord) -> None:
    """Overwrite the mutable fields of the single share ``search`` resolves to."""
    current = get_share(db, search)
    with _store_errors(db, f"update_share {search!r}"):
        # scoped by primary key so exactly one row can change
        updated = (
            db.query(Share)
            .filter(Share.id == current.id)
            .update(
                {
                    Share.exp: new_share.exp,
                    Share.crt: new_share.crt,
                    Share.url: new_share.url,
                    Share.expired: new_share.expired,
                    Share.token: new_share.token,
                },
                synchronize_session=False,
            )
        )
        if updated != 1:
            # deleted between the lookup and the write
            raise NotFoundError()
        db.commit()


def delete_share(db: Session, share_id: int) -> None:
    with _store_errors(db, f"delete_share id={share_id}"):
        deleted = (
            db.query(Share)
            .filter(Share.id == share_id)
            .delete(synchronize_session=False)
        )
        if deleted == 0:
            raise NotFoundError()
        db.commit()


def token_in_use(db: Session, token: str, exclude_id: Optional[int] = None) -> bool:
    with _store_errors(db, "token_in_use"):
        query = db.query(Share.id).filter(Share.token == token)
        if exclude_id is not None:
            query = query.filter(Share.id != exclude_id)
        return query.first() is not None


def list_shares(db: Session, skip: int = 0, limit: int = 100) -> List[ShareRecord]:
    with _store_errors(db, "list_shares"):
        rows = db.query(Share).order_by(Share.id).offset(skip).limit(limit).all()
    return [share_from_row(r) for r in rows]


def count_shares(db: Session) -> int:
    with _store_errors(db, "count_shares"):
        return db.query(func.count(Share.id)).scalar() or 0


# --- users ---

def create_user(db: Session, username: str, password_hash: str, is_admin: bool = False) -> UserRecord:
    db_user = User(username=username, password=password_hash, is_admin=is_admin)
    with _store_errors(db, "create_user", insert=True):
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
    return user_from_row(db_user)


def find_user(db: Session, user_id: Optional[int] = None, username: Optional[str] = None) -> Optional[UserRecord]:
    if user_id is None and username is None:
        raise QueryFailedError("find_user needs a user id or a username")
    with _store_errors(db, "find_user"):
        query = db.query(User)
        if user_id is not None:
            query = query.filter(User.id == user_id)
        if username is not None:
            query = query.filter(User.username == username)
        row = query.first()
    if row is None:
        return None
    return user_from_row(row)


def delete_user(db: Session, user_id: int) -> None:
    with _store_errors(db, f"delete_user id={user_id}"):
        deleted = db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        if deleted == 0:
            raise NotFoundError()
        db.commit()
