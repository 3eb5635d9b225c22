"""
fairchance.store_db
===================

SQLite-backed implementation of the :class:`~fairchance.store.FormStore`
surface.

This adapter wraps the CRUD helpers in :pymod:`fairchance.db` so that any
code expecting the in-memory store can switch to a persistent one without
changing its calls.
"""

from __future__ import annotations

from typing import Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from fairchance.db import SessionLocal, all_case_ids, delete_blob, get_blob, put_blob
from fairchance.store import FormStore


class DBFormStore(FormStore):
    """
    Drop-in replacement for :class:`~fairchance.store.MemoryFormStore`
    backed by SQLite.

    Methods mirror the in-memory store:
    * save(record, case_id)
    * load(case_id)
    * clear(case_id)
    * iteration / len() over stored case ids
    """

    def __init__(self, session: Session | None = None, default_key: Optional[str] = None) -> None:
        super().__init__(default_key)
        self._session: Session = session or SessionLocal()

    # ------------------------------------------------------------- backend
    def read_blob(self, key: str) -> Optional[str]:
        return get_blob(self._session, key)

    def write_blob(self, key: str, text: str) -> None:
        try:
            put_blob(self._session, key, text)
        except SQLAlchemyError:
            self._session.rollback()
            raise

    def delete_blob(self, key: str) -> None:
        try:
            delete_blob(self._session, key)
        except SQLAlchemyError:
            self._session.rollback()
            raise

    # ------------------------------------------------------ dunder helpers
    def __iter__(self) -> Iterator[str]:
        yield from all_case_ids(self._session)

    def __len__(self) -> int:
        return len(all_case_ids(self._session))

    # ----------------------------------------------------- context manager
    def __enter__(self) -> "DBFormStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._session.close()
