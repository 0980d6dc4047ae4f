"""Run the console: python -m admin_console"""
import logging

import uvicorn

from admin_console.config import settings
from admin_console.logging_setup import configure_logging
from admin_console.web.app import create_app

logger = logging.getLogger(__name__)


def main() -> None:
    log_file = configure_logging(settings)
    logger.info(f"Starting admin console on {settings.HOST}:{settings.PORT}, backend {settings.API_BASE_URL}")
    logger.info(f"Logging to {log_file}")
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
