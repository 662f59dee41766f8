import logging
import sys

from app.config import settings

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Install a single stream handler on the root logger.

    Safe to call more than once; only the first call installs the handler.
    """
    global _configured
    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)
    # uvicorn access logs duplicate the request lines we already emit
    logging.getLogger("uvicorn.access").propagate = False
    _configured = True
