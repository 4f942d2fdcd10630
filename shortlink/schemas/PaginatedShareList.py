from shortlink.schemas.ShareInfoResponse import ShareInfoResponse
from pydantic import BaseModel
from typing import List

class PaginatedShareList(BaseModel):
    total: int
    skip: int
    limit: int
    shares: List[ShareInfoResponse]
