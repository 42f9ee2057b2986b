"""Logging setup for the service.

Configures the root logger from :class:`LoggingSettings` so every module
can keep using ``logging.getLogger(__name__)``. JSON output is rendered by
structlog.
"""
from __future__ import annotations

import logging

import structlog

from .config import LoggingSettings, settings as default_settings

_CONFIGURED_FLAG = "_llmstore_configured"


def _build_formatter(fmt: str) -> logging.Formatter:
    if fmt == "json":
        return structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
            ],
        )
    return logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def setup_logging(config: LoggingSettings | None = None) -> None:
    """Configure root logging once per process.

    Calling it again only updates the level, so the lifespan hook and
    ``main.py`` can both call it safely.
    """
    config = config or default_settings.logging
    root = logging.getLogger()
    root.setLevel(config.level.upper())

    if getattr(root, _CONFIGURED_FLAG, False):
        return

    formatter = _build_formatter(config.format)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if config.file:
        file_handler = logging.FileHandler(config.file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    setattr(root, _CONFIGURED_FLAG, True)
