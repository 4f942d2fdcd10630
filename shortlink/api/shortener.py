from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
import logging

from shortlink.core.config import settings
from shortlink.core.exceptions import (
    ContentTypeInvalidError,
    NotFoundError,
    ParseFailureError,
    PayloadTooLargeError,
)
from shortlink.db.Connection import database
from shortlink.schemas.ShareCreateRequest import ShareCreateRequest
from shortlink.schemas.UserRecord import UserRecord
from shortlink.services.auth import require_admin
from shortlink.services.shortener import URLService

logger = logging.getLogger(__name__)

router = APIRouter()


async def read_share_payload(request: Request) -> ShareCreateRequest:
    """Parse the create body: JSON only, bounded in size."""
    content_type = request.headers.get("content-type", "")
    if content_type.split(";", 1)[0].strip().lower() != "application/json":
        raise ContentTypeInvalidError()

    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > settings.MAX_PAYLOAD_BYTES:
        raise PayloadTooLargeError()

    body = await request.body()
    if len(body) > settings.MAX_PAYLOAD_BYTES:
        raise PayloadTooLargeError()

    try:
        return ShareCreateRequest.model_validate_json(body)
    except ValidationError as e:
        first = e.errors()[0]
        raise ParseFailureError(f"unable to parse request payload: {first['msg']}") from None


@router.post("/shorten", status_code=status.HTTP_201_CREATED, response_class=PlainTextResponse, tags=["shares"])
def shorten_url_endpoint(
    admin: UserRecord = Depends(require_admin),
    share_request: ShareCreateRequest = Depends(read_share_payload),
    db: Session = Depends(database.get_db),
):
    share = URLService.create_short_url(db, share_request.url, share_request.exp)
    logger.info(f"API success: {admin.username} shortened {share.url[:50]}... to {share.token}")
    return URLService.shortened_link(share)


@router.get("/r/{token}", tags=["redirect"])
def redirect_to_url_endpoint(token: str, db: Session = Depends(database.get_db)):
    try:
        share = URLService.resolve(db, token)
    except NotFoundError:
        logger.warning(f"Redirect 404: token not found: {token[:50]}")
        raise
    return RedirectResponse(url=share.url, status_code=status.HTTP_302_FOUND)


@router.delete("/r/{token}", status_code=status.HTTP_204_NO_CONTENT, tags=["shares"])
def delete_share_endpoint(
    token: str,
    admin: UserRecord = Depends(require_admin),
    db: Session = Depends(database.get_db),
):
    share = URLService.delete_share(db, token)
    logger.info(f"{admin.username} deleted share id={share.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
