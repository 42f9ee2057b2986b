"""Create the agent output schema ahead of starting the API server.

Safe to run repeatedly: existing tables are left as they are.
"""

import asyncio
import logging
import sys

from llmstore.config import settings
from llmstore.db import Database
from llmstore.errors import StoreConnectivityError
from llmstore.logging_config import setup_logging
from llmstore.models import Base
from llmstore.startup import StartupConnector

logger = logging.getLogger(__name__)


async def init_database() -> None:
    """Connect with the configured retry policy and create missing tables."""
    database = Database(settings.db)
    connector = StartupConnector(
        database.initialize,
        max_attempts=settings.db.connect_attempts,
        delay=settings.db.connect_delay,
    )
    try:
        await connector.connect()
    finally:
        await database.dispose()

    logger.info(f"Tables ready: {', '.join(Base.metadata.tables.keys())}")


async def main():
    """Main entry point."""
    setup_logging(settings.logging)
    try:
        await init_database()
    except StoreConnectivityError as e:
        logger.error(f"Error initializing database: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
