import logging
import sys

from shortlink.core.config import settings

LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s'


def configure_logging(level=None):
    logging.basicConfig(
        level=level or settings.LOG_LEVEL,
        format=LOG_FORMAT,
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    logging.getLogger("uvicorn.error").propagate = True
    logging.getLogger("uvicorn.access").disabled = True

    # third-party noise; passlib logs backend detection at import
    for name in ("sqlalchemy.engine", "redis", "passlib"):
        logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger("shortlink")
