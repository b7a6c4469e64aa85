"""
Logging setup for the Legal Office backend.
"""

import logging

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once per process."""
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()]
    )
    # httpx logs every request at INFO, which duplicates our own request logging
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _configured = True
