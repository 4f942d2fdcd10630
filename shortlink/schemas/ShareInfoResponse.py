from pydantic import BaseModel, Field
from typing import Optional

# Response DTOs
class ShareInfoResponse(BaseModel):
    # destination_url is the Python field, 'url' is the JSON key
    id: int
    destination_url: str = Field(..., alias="url")
    token: Optional[str] = None
    short_url: Optional[str] = None
    created_at: int
    expires_at: Optional[int] = None
    expired: bool = False

    model_config = {"populate_by_name": True}
