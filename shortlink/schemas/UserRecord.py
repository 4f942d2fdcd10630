from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class UserRecord(BaseModel):
    id: int
    username: str = Field(..., min_length=1)
    # encoded argon2 hash
    password: str = Field(..., min_length=1, repr=False)
    is_admin: bool = False

    model_config = {"from_attributes": True}


class PrincipalKind(str, Enum):
    ANONYMOUS = "anonymous"
    USER = "user"
    ADMIN = "admin"


class Principal(BaseModel):
    """Result of resolving request credentials."""

    kind: PrincipalKind = PrincipalKind.ANONYMOUS
    user: Optional[UserRecord] = None

    @property
    def is_authenticated(self) -> bool:
        return self.kind != PrincipalKind.ANONYMOUS

    @property
    def is_admin(self) -> bool:
        return self.kind == PrincipalKind.ADMIN
