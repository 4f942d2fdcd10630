from sqlalchemy.orm import Session
from typing import Optional
import logging

from shortlink.core.config import settings
from shortlink.core.exceptions import (
    IdMissingError,
    InvalidCharacterError,
    NotFoundError,
    ShortLinkError,
    TokenCollisionError,
    TokenMissingError,
)
from shortlink.db import repository
from shortlink.db.repository import MAX_ID, Search
from shortlink.schemas.ShareRecord import ShareRecord
from shortlink.utils.tokens import TokenGenerator, default_generator


logger = logging.getLogger(__name__)


class URLService:

    generator: TokenGenerator = default_generator

    @staticmethod
    def shortened_link(share: ShareRecord) -> str:
        if not share.token:
            raise TokenMissingError()
        return f"{settings.BASE_URL}/r/{share.token}"

    @classmethod
    def assign_token(cls, db: Session, share: ShareRecord) -> ShareRecord:
        """Generate a token for ``share`` and persist it before returning the updated record."""
        if share.id is None:
            raise IdMissingError()

        for attempt in range(settings.TOKEN_MAX_ATTEMPTS):
            token = cls.generator.generate(share.id)
            if not repository.token_in_use(db, token, exclude_id=share.id):
                break
            logger.info(f"Token collision on attempt {attempt + 1}/{settings.TOKEN_MAX_ATTEMPTS} for id={share.id}")
        else:
            raise TokenCollisionError()

        tokenized = share.model_copy(update={"token": token})
        repository.update_share(db, Search.by_id(share.id), tokenized)
        return tokenized

    @classmethod
    def create_short_url(cls, db: Session, url: str, exp: Optional[int] = None) -> ShareRecord:
        share = repository.create_share(db, url, exp)
        try:
            share = cls.assign_token(db, share)
        except ShortLinkError:
            # a share without a token is unreachable, so drop it
            logger.error(f"Token assignment failed for id={share.id}, removing the share")
            try:
                repository.delete_share(db, share.id)
            except ShortLinkError:
                logger.exception(f"Failed to remove tokenless share id={share.id}")
            raise

        logger.info(f"Shortened {share.url[:50]}... to {share.token} (id={share.id})")
        return share

    @classmethod
    def lookup(cls, db: Session, token: str) -> ShareRecord:
        """Find the share a token points at, whether or not it is still active."""
        if settings.STRICT_TOKEN_MATCH:
            return repository.get_share(db, Search.by_token(token))

        prefix = cls.generator.prefix(token)
        if not prefix:
            raise NotFoundError()
        try:
            share_id = cls.generator.codec.decode(prefix)
        except InvalidCharacterError:
            logger.warning(f"Token with characters outside the alphabet: {token[:50]}")
            raise NotFoundError() from None
        if share_id > MAX_ID:
            raise NotFoundError()
        return repository.get_share(db, Search.by_id(share_id))

    @classmethod
    def resolve(cls, db: Session, token: str) -> ShareRecord:
        """The active share behind ``token``; expired shares count as missing."""
        share = cls.lookup(db, token)
        if not share.is_active(repository.get_time_seconds()):
            logger.info(f"Share id={share.id} is expired")
            raise NotFoundError()
        return share

    @classmethod
    def delete_share(cls, db: Session, token: str) -> ShareRecord:
        share = cls.lookup(db, token)
        repository.delete_share(db, share.id)
        logger.info(f"Deleted share id={share.id} ({share.url[:50]})")
        return share

    @classmethod
    def expire_share(cls, db: Session, token: str) -> ShareRecord:
        share = cls.lookup(db, token)
        expired = share.model_copy(update={"expired": True})
        repository.update_share(db, Search.by_id(share.id), expired)
        logger.info(f"Marked share id={share.id} as expired")
        return expired

    @classmethod
    def regenerate_token(cls, db: Session, token: str) -> ShareRecord:
        share = cls.lookup(db, token)
        return cls.assign_token(db, share)
