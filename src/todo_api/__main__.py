"""Run the API with uvicorn: `python -m todo_api`."""
from __future__ import annotations

import uvicorn

from .logging_config import get_logger
from .main import app


def main() -> None:
    settings = app.state.settings
    logger = get_logger(__name__)
    logger.info("Server running on http://%s:%s", settings.host, settings.port)
    logger.info("Health check: http://%s:%s/api/health", settings.host, settings.port)
    # uvicorn handles SIGINT/SIGTERM and runs the shutdown lifespan; its loggers
    # already share the handlers installed by configure_logging
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
