from typing import Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

# 61 symbols; "g" is left out so it can act as the padding delimiter
DEFAULT_ALPHABET = "0123456789abcdefhijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


class Settings(BaseSettings):
    PROJECT_NAME: str = "URL Shortener"
    BASE_URL: str = "http://localhost:8000"
    LOG_LEVEL: str = "INFO"

    # Database (DATABASE_URL wins over the POSTGRES_* parts)
    DATABASE_URL: Optional[str] = None
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_SERVER: Optional[str] = None
    POSTGRES_PORT: str = "5432"
    POSTGRES_DB: Optional[str] = None

    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 5
    DB_CONNECT_TIMEOUT: int = 5
    DB_STATEMENT_TIMEOUT_MS: int = 5000

    # Token generation
    TOKEN_ALPHABET: str = DEFAULT_ALPHABET
    TOKEN_DELIMITER: str = "g"
    TOKEN_MIN_LENGTH: int = 6
    TOKEN_MAX_ATTEMPTS: int = 5
    STRICT_TOKEN_MATCH: bool = False

    MAX_PAYLOAD_BYTES: int = 1024

    # Sessions; SECRET_KEY is required and signs the session cookie
    SECRET_KEY: str
    SESSION_COOKIE_NAME: str = "user_token"
    SESSION_MAX_AGE: int = 14 * 24 * 60 * 60
    SESSION_HTTPS_ONLY: bool = False

    # Redis is only used by the rate limiter
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_LIMIT: int = 100
    RATE_LIMIT_WINDOW: int = 60

    class Config:
        env_file = ".env"

    @field_validator("SECRET_KEY")
    def check_secret_key(cls, v):
        if not v.strip():
            raise ValueError("SECRET_KEY must not be blank")
        return v

    @model_validator(mode="after")
    def check_token_settings(self):
        alphabet = self.TOKEN_ALPHABET
        if len(alphabet) < 2:
            raise ValueError("TOKEN_ALPHABET needs at least 2 symbols")
        if len(set(alphabet)) != len(alphabet):
            raise ValueError("TOKEN_ALPHABET contains duplicate symbols")
        if len(self.TOKEN_DELIMITER) != 1:
            raise ValueError("TOKEN_DELIMITER must be a single character")
        if self.TOKEN_DELIMITER in alphabet:
            raise ValueError("TOKEN_DELIMITER must not be part of TOKEN_ALPHABET")
        if self.TOKEN_MIN_LENGTH < 1:
            raise ValueError("TOKEN_MIN_LENGTH must be at least 1")
        return self

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.POSTGRES_SERVER and self.POSTGRES_DB:
            return (
                f"postgresql://{self.POSTGRES_USER}:"
                f"{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:"
                f"{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )
        return "sqlite:///./shares.db"


settings = Settings()
