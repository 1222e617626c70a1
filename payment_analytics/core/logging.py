"""Logging utilities."""
from __future__ import annotations

import logging.config
from pathlib import Path

from payment_analytics.core.config import get_settings


def configure_logging(config_path: Path | None = None) -> None:
    """Configure logging from the YAML configuration file if present."""
    config_path = config_path or get_settings().logging_config_path
    if config_path.exists():
        import yaml  # type: ignore[import-untyped]

        with config_path.open("r", encoding="utf-8") as config_file:
            logging.config.dictConfig(yaml.safe_load(config_file))
    else:
        logging.basicConfig(level=logging.INFO)
