from __future__ import annotations

import logging


def configure_app_logging(level: str = "INFO") -> None:
    """
    Set the level for the `submission_authz.*` loggers.

    Uvicorn already configures handlers; this only adjusts our package.
    Set `APP_LOG_LEVEL=DEBUG` (or INFO/WARNING/ERROR) to control verbosity.
    """

    normalized = level.upper()
    logging.getLogger("submission_authz").setLevel(normalized)
    logging.getLogger("submission_authz").propagate = True
