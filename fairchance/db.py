"""
fairchance.db
=============

SQLite persistence layer for the fair-chance workflow.

This module exposes:

* ``engine`` – a global SQLModel engine pointing at *fairchance.db*
* ``SessionLocal`` – a session factory used via ``with SessionLocal() as s:``
* ``create_all()`` – helper to create tables at first run
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import Column, Text
from sqlalchemy.engine import Engine
from sqlmodel import Field, Session, SQLModel, create_engine, select

from fairchance.settings import DB_ECHO, DB_URL


# ---------------------------------------------------------------------------
# Engine (SQLite file lives in project root unless FAIRCHANCE_DB_FILE is set)
# ---------------------------------------------------------------------------
engine = create_engine(DB_URL, echo=DB_ECHO)


# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------
def SessionLocal(bind: Optional[Engine] = None) -> Session:  # noqa: N802 (factory camel‑case for consistency with FastAPI docs)
    """Return a new Session bound to *bind* or the global engine."""
    return Session(bind or engine)


# ---------------------------------------------------------------------------
# ORM model: one JSON blob per case id
# ---------------------------------------------------------------------------
class CaseBlobDB(SQLModel, table=True):
    """
    Stored case record.

    *payload* holds the camelCase JSON exactly as written by
    :pymeth:`fairchance.store.FormStore.save`; it is validated on read, not
    on write.
    """

    __tablename__ = "case_blob"

    case_id: str = Field(primary_key=True, index=True)
    payload: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(default_factory=datetime.utcnow)


# ---------------------------------------------------------------------------
# Convenience CRUD helpers
# ---------------------------------------------------------------------------
def put_blob(s: Session, case_id: str, payload: str) -> None:
    """Insert or overwrite the row for *case_id*."""
    s.merge(CaseBlobDB(case_id=case_id, payload=payload, updated_at=datetime.utcnow()))
    s.commit()


def get_blob(s: Session, case_id: str) -> str | None:
    """Return the stored payload or *None* if missing."""
    row = s.get(CaseBlobDB, case_id)
    return row.payload if row else None


def delete_blob(s: Session, case_id: str) -> None:
    row = s.get(CaseBlobDB, case_id)
    if row is not None:
        s.delete(row)
        s.commit()


def all_case_ids(s: Session) -> List[str]:
    """Return every stored case id."""
    return list(s.exec(select(CaseBlobDB.case_id)).all())


# ---------------------------------------------------------------------------
# Utility: create tables
# ---------------------------------------------------------------------------
def create_all(bind: Optional[Engine] = None) -> None:
    """Create all tables for imported SQLModel subclasses, including CaseBlobDB."""
    SQLModel.metadata.create_all(bind or engine)
