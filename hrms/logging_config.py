from __future__ import annotations

import logging


def configure_app_logging(level: str = "INFO") -> None:
    """
    Set the level of the `hrms` logger tree.

    Notes:
    - Uvicorn already configures handlers; this only adjusts levels for our package.
    - Set `HRMS_LOG_LEVEL=DEBUG` (or INFO/WARNING/ERROR) to control verbosity.
    - Bearer tokens are never passed to a logger anywhere in the package.
    """

    normalized = level.upper()
    logging.getLogger("hrms").setLevel(normalized)
    logging.getLogger("hrms").propagate = True
