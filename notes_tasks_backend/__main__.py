"""Runs the server: ``python -m notes_tasks_backend``."""
import logging

import uvicorn

from .api.config import Settings, configure_logging
from .api.main import create_app

logger = logging.getLogger("notes_tasks_backend")


def main():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    app = create_app(settings)
    logger.info("Server running on http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
