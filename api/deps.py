"""
api.deps
========

FastAPI dependency providers.

`get_store` returns a singleton **DBFormStore** so every request talks to
the persistent SQLite store.  `get_registry` keeps one live
:class:`~fairchance.workflow.Workflow` per case id; the phase and the
in-flight form live there, the committed record lives in the store.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Iterator

from fairchance.settings import settings
from fairchance.store import FormStore
from fairchance.store_db import DBFormStore
from fairchance.workflow import Workflow


class WorkflowRegistry:
    """Live workflows keyed by case id."""

    def __init__(self, store: FormStore, **workflow_options: Any) -> None:
        self.store = store
        self.workflow_options = workflow_options
        self._flows: Dict[str, Workflow] = {}

    def get(self, case_id: str) -> Workflow:
        if case_id not in self._flows:
            self._flows[case_id] = Workflow(self.store, case_id, **self.workflow_options)
        return self._flows[case_id]

    def drop(self, case_id: str) -> None:
        self._flows.pop(case_id, None)

    def __iter__(self) -> Iterator[str]:
        return iter(self._flows)

    def __len__(self) -> int:
        return len(self._flows)


@lru_cache
def get_store() -> DBFormStore:
    """Singleton DB-backed store (persists across requests)."""
    from fairchance.db import create_all
    create_all()
    return DBFormStore()


@lru_cache
def get_settings():
    """Return application settings."""
    return settings


@lru_cache
def get_registry() -> WorkflowRegistry:
    return WorkflowRegistry(get_store())
