from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_app_logging(level: str = "INFO") -> None:
    """
    Set the level of the ``sharepoint_auth`` logger tree.

    Notes:
    - Stdlib logging only. When a server (e.g. uvicorn) already installed
      root handlers we leave them alone; otherwise a stream handler is added.
    - Set `SHAREPOINT_LOG_LEVEL=DEBUG` (or INFO/WARNING/ERROR) to control verbosity.
    - Context tokens, access tokens and the app secret are never logged.
    """

    if not logging.getLogger().handlers:
        logging.basicConfig(format=LOG_FORMAT)

    package_logger = logging.getLogger("sharepoint_auth")
    package_logger.setLevel(level.upper())
    package_logger.propagate = True
