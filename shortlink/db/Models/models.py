from sqlalchemy import Column, String, Integer, BigInteger, Boolean, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# i64 max; stored in `exp` for shares that never expire
NEVER_EXPIRES = 2**63 - 1


class Share(Base):
    __tablename__ = "shares"
    # AUTOINCREMENT on sqlite so a deleted id is never handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    # sqlite only honours AUTOINCREMENT on a plain INTEGER column
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)

    # Expiry / creation time, epoch seconds
    exp = Column(BigInteger, nullable=False, default=NEVER_EXPIRES)
    crt = Column(BigInteger, nullable=False)

    url = Column(Text, nullable=False)
    expired = Column(Boolean, nullable=False, default=False)

    # Null until the token is generated from the assigned id
    token = Column(Text, nullable=True, index=True)


class User(Base):
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, nullable=False, unique=True, index=True)
    # argon2 encoded hash, never the plaintext
    password = Column(String, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
