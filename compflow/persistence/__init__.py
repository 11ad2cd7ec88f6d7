"""Persistence layer for compflow workflows and components."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from ..config import CompflowConfig, load_config
from ..db import Database
from .inmemory import InMemoryComponentRepository, InMemoryWorkflowRepository
from .repository import ComponentRepository, WorkflowRepository
from .sql import SQLComponentRepository, SQLWorkflowRepository


@dataclass
class Repositories:
    """Workflow and component stores sharing one backend."""

    workflows: WorkflowRepository
    components: ComponentRepository


_repositories_instance: Repositories | None = None


def _normalize_url(database_url: str) -> str:
    # plain driver names get their async driver
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return database_url


def get_repositories(
    database_url: Optional[str] = None, config: Optional[CompflowConfig] = None
) -> Repositories:
    """Factory function to obtain the workflow and component repositories.

    The backend is selected based on ``database_url`` which can be provided
    explicitly, via environment variable ``COMPFLOW_DATABASE_URL`` or
    ``DATABASE_URL``, or from loaded configuration. When no database is
    configured, in-memory repositories are returned.
    """

    global _repositories_instance
    if _repositories_instance is not None and database_url is None and config is None:
        return _repositories_instance

    config = config or load_config()
    database_url = (
        database_url
        or os.getenv("COMPFLOW_DATABASE_URL")
        or os.getenv("DATABASE_URL")
        or getattr(config, "database_url", None)
    )

    if not database_url:
        _repositories_instance = Repositories(
            workflows=InMemoryWorkflowRepository(),
            components=InMemoryComponentRepository(),
        )
        return _repositories_instance

    if "://" not in database_url:
        raise ValueError(f"Unsupported database backend: {database_url}")

    database = Database(_normalize_url(database_url))
    _repositories_instance = Repositories(
        workflows=SQLWorkflowRepository(database),
        components=SQLComponentRepository(database),
    )
    return _repositories_instance


__all__ = [
    "ComponentRepository",
    "InMemoryComponentRepository",
    "InMemoryWorkflowRepository",
    "Repositories",
    "SQLComponentRepository",
    "SQLWorkflowRepository",
    "WorkflowRepository",
    "get_repositories",
]
