from pydantic import BaseModel, Field, field_validator
from typing import Optional

from shortlink.db.Models.models import NEVER_EXPIRES

# Request DTOs
class ShareCreateRequest(BaseModel):
    url: str = Field(..., min_length=1)
    # epoch seconds; omitted means the share never expires
    exp: Optional[int] = Field(None, ge=0, le=NEVER_EXPIRES)

    @field_validator('url')
    def validate_url(cls, v):
        url_str = v.strip()

        # Length check
        if len(url_str) > 2048:
            raise ValueError('URL must be less than 2048 characters')

        # Only allow http/https
        if not (url_str.startswith('http://') or url_str.startswith('https://')):
            raise ValueError('Only HTTP and HTTPS URLs are allowed')

        if len(url_str.split('://', 1)[1]) == 0:
            raise ValueError('URL is missing a host')

        return url_str
