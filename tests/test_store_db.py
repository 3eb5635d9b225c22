"""
tests/test_store_db.py
======================

Integration-style tests for the SQLite-backed FormStore.

These mirror `test_store.py` but use DBFormStore on a throw-away database
file to ensure persistence and parity with the in-memory version.
"""

import pytest
from sqlmodel import create_engine

from fairchance.db import SessionLocal, create_all
from fairchance.models import CaseRecord, Decision
from fairchance.store_db import DBFormStore


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(f"sqlite:///{tmp_path / 'test.db'}")
    create_all(eng)
    return eng


def test_save_and_load(engine):
    with DBFormStore(session=SessionLocal(engine)) as store:
        store.save(CaseRecord(applicant_name="Sam", decision=Decision.RESCIND), "case-1")
        rec = store.load("case-1")
    assert rec.applicant_name == "Sam"
    assert rec.decision is Decision.RESCIND


def test_persistence_across_sessions(engine):
    # write in first session
    with DBFormStore(session=SessionLocal(engine)) as store:
        store.save(CaseRecord(applicant_name="Gamma"), "case-g")

    # read in a brand-new session
    with DBFormStore(session=SessionLocal(engine)) as store2:
        assert store2.load("case-g").applicant_name == "Gamma"


def test_overwrite_and_clear(engine):
    with DBFormStore(session=SessionLocal(engine)) as store:
        store.save(CaseRecord(applicant_name="One"))
        store.save(CaseRecord(applicant_name="Two"))
        assert store.load().applicant_name == "Two"
        assert len(store) == 1

        store.clear()
        assert store.load() is None
        assert list(store) == []


def test_missing_case_is_none(engine):
    with DBFormStore(session=SessionLocal(engine)) as store:
        assert store.load("nobody") is None
