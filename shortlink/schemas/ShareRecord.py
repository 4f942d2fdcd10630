from typing import Optional

from pydantic import BaseModel, Field

from shortlink.db.Models.models import NEVER_EXPIRES


class ShareRecord(BaseModel):
    """One shortened URL as the rest of the application sees it."""

    id: Optional[int] = None
    url: str = Field(..., min_length=1)
    crt: int
    exp: int = NEVER_EXPIRES
    expired: bool = False
    token: Optional[str] = None

    model_config = {"from_attributes": True}

    def never_expires(self) -> bool:
        return self.exp == NEVER_EXPIRES

    def is_active(self, now: int) -> bool:
        """False once the share is flagged expired or its expiry time has passed."""
        return not self.expired and self.exp > now
