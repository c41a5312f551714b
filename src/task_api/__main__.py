"""
Run the task API server.

Usage:
    python -m task_api
    task-api
"""
from __future__ import annotations

import logging
import sys

import uvicorn

from .main import create_app
from .logging_setup import setup_logging
from .repositories import StorageError, get_repository
from .settings import get_settings

logger = logging.getLogger("task_api")


# PUBLIC_INTERFACE
def main() -> None:
    """
    Connect to storage, then serve until SIGINT/SIGTERM.

    Exits with status 1 if the storage connection cannot be established. On a
    termination signal uvicorn stops accepting connections, lets in-flight
    requests finish, and the app lifespan closes the storage connection.
    """
    settings = get_settings()
    setup_logging(settings.log_level)

    try:
        repository = get_repository(settings)
    except StorageError as e:
        logger.error("Storage connection error: %s", e)
        sys.exit(1)

    app = create_app(settings, repository=repository)
    logger.info("Backend server starting on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
