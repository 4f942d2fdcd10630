import logging
from fastapi import Request
import redis.exceptions

from shortlink.core.config import settings

logger = logging.getLogger(__name__)
RATE_LIMIT_VALUE_KEY = "config:RATE_LIMIT_LIMIT"
RATE_LIMIT_WINDOW_KEY = "config:RATE_LIMIT_WINDOW"
PROTECTED_PREFIXES = ("/login", "/admin")


def get_rate_limit_config(redis_client):
    """Limit and window, overridable at runtime through redis config keys."""
    limit, window = settings.RATE_LIMIT_LIMIT, settings.RATE_LIMIT_WINDOW
    try:
        limit_str = redis_client.get(RATE_LIMIT_VALUE_KEY)
        window_str = redis_client.get(RATE_LIMIT_WINDOW_KEY)
        limit = int(limit_str) if limit_str else limit
        window = int(window_str) if window_str else window
    except (redis.exceptions.RedisError, ValueError):
        logger.warning(
            f"Failed to fetch/parse dynamic rate limit config. "
            f"Using defaults: {limit} requests per {window} seconds."
        )
    return limit, window


def get_client_ip(request: Request) -> str:
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def is_protected_path(path: str) -> bool:
    return path.startswith(PROTECTED_PREFIXES)


def check_rate_limit(redis_client, key: str, limit: int, window: int):
    """True if allowed, False if over the limit, None when redis is unreachable."""
    try:
        current = redis_client.get(key)
        if current and int(current) >= limit:
            return False  # Limit exceeded

        pipe = redis_client.pipeline()
        pipe.incr(key, 1)
        if not current:
            pipe.expire(key, window)
        pipe.execute()
    except redis.exceptions.RedisError:
        logger.warning("Redis unavailable. Rate limiting skipped (fail open).")
        return None
    return True
