from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging

from shortlink.db import repository
from shortlink.db.Connection import database
from shortlink.schemas.PaginatedShareList import PaginatedShareList
from shortlink.schemas.ShareInfoResponse import ShareInfoResponse
from shortlink.schemas.ShareRecord import ShareRecord
from shortlink.schemas.UserRecord import UserRecord
from shortlink.services.auth import admin_guard
from shortlink.services.shortener import URLService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])

require_dashboard_admin = admin_guard("Unauthorized, consider logging in at /login")


def share_info(share: ShareRecord) -> ShareInfoResponse:
    return ShareInfoResponse(
        id=share.id,
        destination_url=share.url,
        token=share.token,
        short_url=URLService.shortened_link(share) if share.token else None,
        created_at=share.crt,
        expires_at=None if share.never_expires() else share.exp,
        expired=share.expired,
    )


@router.get("", response_model=PaginatedShareList)
def dashboard_endpoint(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    admin: UserRecord = Depends(require_dashboard_admin),
    db: Session = Depends(database.get_db),
):
    """Paginated listing of every share."""
    logger.info(f"Admin {admin.username} accessed share list: skip={skip}, limit={limit}")
    total = repository.count_shares(db)
    shares = repository.list_shares(db, skip, limit)
    return PaginatedShareList(
        total=total,
        skip=skip,
        limit=limit,
        shares=[share_info(s) for s in shares],
    )


@router.get("/stats/{token}", response_model=ShareInfoResponse)
def share_stats_endpoint(
    token: str,
    admin: UserRecord = Depends(require_dashboard_admin),
    db: Session = Depends(database.get_db),
):
    return share_info(URLService.lookup(db, token))


@router.post("/shares/{token}/expire", response_model=ShareInfoResponse)
def expire_share_endpoint(
    token: str,
    admin: UserRecord = Depends(require_dashboard_admin),
    db: Session = Depends(database.get_db),
):
    share = URLService.expire_share(db, token)
    logger.info(f"Admin {admin.username} expired share id={share.id}")
    return share_info(share)


@router.post("/shares/{token}/regenerate", response_model=ShareInfoResponse)
def regenerate_token_endpoint(
    token: str,
    admin: UserRecord = Depends(require_dashboard_admin),
    db: Session = Depends(database.get_db),
):
    share = URLService.regenerate_token(db, token)
    logger.info(f"Admin {admin.username} regenerated token for share id={share.id}")
    return share_info(share)
