# re-export common schemas for simpler imports
from .LoginRequest import LoginRequest, LoginResponse
from .PaginatedShareList import PaginatedShareList
from .ShareCreateRequest import ShareCreateRequest
from .ShareInfoResponse import ShareInfoResponse
from .ShareRecord import ShareRecord
from .UserRecord import Principal, PrincipalKind, UserRecord

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "PaginatedShareList",
    "ShareCreateRequest",
    "ShareInfoResponse",
    "ShareRecord",
    "Principal",
    "PrincipalKind",
    "UserRecord",
]
