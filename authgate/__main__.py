"""Run the service with uvicorn: ``python -m authgate``."""

from __future__ import annotations

import logging
import sys

import uvicorn

from .config import get_settings
from .errors import ConfigurationError
from .main import create_app

logger = logging.getLogger("authgate")

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s - %(message)s"


def main() -> int:
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        logging.basicConfig(format=LOG_FORMAT, stream=sys.stdout)
        logger.critical("startup aborted: %s", exc)
        return 1

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT, stream=sys.stdout)
    try:
        app = create_app(settings)
    except ConfigurationError as exc:
        logger.critical("startup aborted: %s", exc)
        return 1
    uvicorn.run(app, host=settings.http_host, port=settings.http_port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
