import logging
from typing import Literal

LOG_FORMAT_DEBUG = (
    "[%(levelname)7s]: %(name)s - %(message)s --- %(pathname)s:%(lineno)d"
)
LOG_FORMAT_PROD = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SECURITY = "%(asctime)s - SECURITY - %(message)s - %(details)s"


def setup_logging(env: Literal["local", "dev", "prod"]) -> None:
    """Setup logging configuration based on the environment."""
    if env in ("local", "dev"):
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT_DEBUG)
    else:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT_PROD)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    security = logging.getLogger("app.security")
    if not security.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT_SECURITY))
        security.addHandler(handler)
    security.setLevel(logging.INFO)
    security.propagate = False
