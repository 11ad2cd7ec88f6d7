from __future__ import annotations

import logging
import os
from typing import Optional

import yaml
from pydantic import BaseModel


class LoggingConfig(BaseModel):
    """Logging settings applied by :func:`configure_logging`."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class EngineConfig(BaseModel):
    """Workflow engine behaviour switches."""

    # Only allow rejecting workflows that are pending approval.
    strict_reject: bool = False


class CompflowConfig(BaseModel):
    """Top-level configuration model."""

    database_url: Optional[str] = None
    logging: LoggingConfig = LoggingConfig()
    engine: EngineConfig = EngineConfig()


def load_config(path: Optional[str] = None) -> CompflowConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to COMPFLOW_CONFIG env
            variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("COMPFLOW_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = CompflowConfig(**data)
    else:
        config = CompflowConfig()

    env_db_url = os.getenv("COMPFLOW_DATABASE_URL") or os.getenv("DATABASE_URL")
    if env_db_url:
        config.database_url = env_db_url
    env_level = os.getenv("COMPFLOW_LOG_LEVEL")
    if env_level:
        config.logging.level = env_level
    return config


def configure_logging(config: Optional[CompflowConfig] = None) -> None:
    """Apply the configured level and format to the root logger."""

    config = config or load_config()
    level = getattr(logging, config.logging.level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=config.logging.format)
