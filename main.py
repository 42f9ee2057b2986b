"""Main entry point for running the FastAPI application with auto-reload."""
import logging

import uvicorn

from llmstore.config import settings
from llmstore.logging_config import setup_logging

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    setup_logging(settings.logging)
    logger.info(f"Starting {settings.app_name} v{settings.version}")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Database: {settings.db.dsn.split('@')[-1] if '@' in settings.db.dsn else 'SQLite'}")
    logger.info(f"Auto-reload: {'Enabled' if settings.debug else 'Disabled'}")

    uvicorn.run(
        "llmstore.api:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.debug,
        reload_dirs=["llmstore"] if settings.debug else None,
        log_level=settings.logging.level.lower(),
    )
