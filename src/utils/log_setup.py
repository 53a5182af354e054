"""Process-wide logging configuration for pipeline entrypoints."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # Transport libraries log request bodies at DEBUG.
    for noisy in ("urllib3", "googleapiclient.discovery_cache", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
