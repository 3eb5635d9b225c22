"""
fairchance.store
================

Single-slot persistence for the in-flight :class:`~fairchance.models.CaseRecord`.

:class:`FormStore` holds the save / load / clear contract; subclasses only
move JSON text in and out of a backend keyed by case id.  Storage failures
are logged and swallowed: a failed read looks like "no prior case" and a
failed write is skipped.

The in-memory store depends only on pydantic and is what the unit tests use.
See :pymod:`fairchance.store_db` for the SQLite-backed variant.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterator, Optional

from pydantic import ValidationError

from .models import CaseRecord
from .settings import settings

logger = logging.getLogger(__name__)


class FormStore(ABC):
    """
    Abstract base for case-record stores.

    Concrete subclasses implement ``read_blob``, ``write_blob`` and
    ``delete_blob``.  Every public method takes an optional *case_id*; when
    omitted the fixed storage key from settings is used.
    """

    def __init__(self, default_key: Optional[str] = None) -> None:
        self.default_key = default_key or settings.storage_key

    # ------------------------------------------------------------------
    # Backend hooks
    # ------------------------------------------------------------------
    @abstractmethod
    def read_blob(self, key: str) -> Optional[str]:
        """Return the stored text for *key*, or None if absent."""

    @abstractmethod
    def write_blob(self, key: str, text: str) -> None:
        """Overwrite *key* with *text*."""

    @abstractmethod
    def delete_blob(self, key: str) -> None:
        """Remove *key* if present."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def save(self, record: CaseRecord, case_id: Optional[str] = None) -> None:
        """Serialize the whole record under *case_id*, replacing what was there."""
        key = case_id or self.default_key
        try:
            text = record.model_dump_json(by_alias=True, exclude_none=True)
            self.write_blob(key, text)
        except Exception as e:
            logger.error(f"Error saving form data for '{key}': {e}")
            return
        logger.debug(f"Saved case record '{key}' ({len(text)} bytes)")

    def load(self, case_id: Optional[str] = None) -> Optional[CaseRecord]:
        """
        Return the stored record, or None when it is absent, unparseable or
        fails schema validation.  An invalid blob is discarded as a whole.
        """
        key = case_id or self.default_key
        try:
            text = self.read_blob(key)
        except Exception as e:
            logger.error(f"Error loading form data for '{key}': {e}")
            return None
        if not text:
            return None

        try:
            return CaseRecord.model_validate_json(text)
        except ValidationError as e:
            logger.error(f"Invalid stored data for '{key}': {e}")
            return None

    def clear(self, case_id: Optional[str] = None) -> None:
        """Remove the stored record; failures are logged."""
        key = case_id or self.default_key
        try:
            self.delete_blob(key)
        except Exception as e:
            logger.error(f"Error clearing form data for '{key}': {e}")
            return
        logger.info(f"Cleared case record '{key}'")


class MemoryFormStore(FormStore):
    """
    Dictionary-backed store.

    Example
    -------
    >>> from fairchance.models import CaseRecord
    >>> store = MemoryFormStore()
    >>> store.save(CaseRecord(applicant_name="Jordan Doe"))
    >>> store.load().applicant_name
    'Jordan Doe'
    """

    def __init__(self, default_key: Optional[str] = None) -> None:
        super().__init__(default_key)
        self._blobs: Dict[str, str] = {}

    def read_blob(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def write_blob(self, key: str, text: str) -> None:
        self._blobs[key] = text

    def delete_blob(self, key: str) -> None:
        self._blobs.pop(key, None)

    # ------------------------------------------------------------------
    # Dunder helpers for convenience
    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[str]:
        return iter(self._blobs)

    def __len__(self) -> int:
        return len(self._blobs)
