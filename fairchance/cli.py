#!/usr/bin/env python
"""
Command-line helpers for the fair-chance workflow.

    fairchance init-db                  create the SQLite tables
    fairchance seed                     store a few sample cases
    fairchance show [CASE_ID]           print a stored case record as JSON
    fairchance clear [CASE_ID]          delete a stored case record
    fairchance serve                    run the HTTP API (uvicorn)
    fairchance elapsed MONTH YEAR DATE  time between a conviction and a date
    fairchance deadline START DAYS      end of a response window
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date, datetime
from typing import List, Optional

from fairchance.dates import elapsed_since, response_deadline
from fairchance.models import Activities, Answer, CaseRecord, Decision
from fairchance.settings import API_DEBUG, API_HOST, API_PORT, LOG_LEVEL

# Sample cases at different points of the flow
SAMPLE_CASES = {
    "sample-extend": CaseRecord(
        employer_name="Acme Corporation",
        applicant_name="Jordan Rivera",
        position_applied="Warehouse Associate",
        assessment_performer="Dana Lee",
        date_conditional_offer=date(2024, 3, 1),
        date_assessment=date(2024, 3, 8),
        date_criminal_history=date(2024, 3, 5),
        conviction_month="06",
        conviction_year="2017",
        criminal_conduct="Misdemeanor theft",
        job_duties=["Loading and unloading trucks", "Inventory counts"],
        activities=Activities(
            work_experience=Answer.YES,
            work_experience_details="Forklift operator since 2019",
            job_training=Answer.YES,
            job_training_details="OSHA certification",
            education=Answer.NO,
            counseling=Answer.UNKNOWN,
            rehabilitation=Answer.NO,
            community_service=Answer.YES,
            community_service_details="Food bank volunteer",
        ),
        decision=Decision.EXTEND,
    ),
    "sample-rescind": CaseRecord(
        employer_name="Widget Industries",
        applicant_name="Sam Taylor",
        position_applied="Bookkeeper",
        assessment_performer="Robert Johnson",
        employer_company="Widget Industries",
        date_conditional_offer=date(2024, 5, 20),
        date_assessment=date(2024, 5, 28),
        date_criminal_history=date(2024, 5, 24),
        conviction_month="02",
        conviction_year="2022",
        criminal_conduct="Embezzlement from a former employer",
        job_duties=["Reconciling accounts", "Processing payroll"],
        activities=Activities(
            work_experience=Answer.NO,
            job_training=Answer.NO,
            education=Answer.NO,
            counseling=Answer.NO,
            rehabilitation=Answer.NO,
            community_service=Answer.NO,
        ),
        decision=Decision.RESCIND,
        rescind_reason="Direct access to company funds is a core duty",
        convictions=["Embezzlement (2022)"],
        response_deadline=5,
        response_email="hr@widget.example",
    ),
}


def _store():
    from fairchance.store_db import DBFormStore
    return DBFormStore()


def cmd_init_db(args) -> int:
    from fairchance.db import create_all
    print("Ensuring database tables exist...")
    create_all()
    print("Done.")
    return 0


def cmd_seed(args) -> int:
    from fairchance.db import create_all
    create_all()
    with _store() as store:
        for case_id, record in SAMPLE_CASES.items():
            store.save(record, case_id)
            print(f"Added: {case_id} ({record.applicant_name}, {record.decision})")
    print(f"\nAdded {len(SAMPLE_CASES)} cases to the database!")
    print("\nYou can now run the API server with:")
    print("fairchance serve")
    return 0


def cmd_show(args) -> int:
    with _store() as store:
        record = store.load(args.case_id)
    if record is None:
        print(f"No stored case '{args.case_id or 'default'}'", file=sys.stderr)
        return 1
    print(json.dumps(record.to_json_dict(), indent=2))
    return 0


def cmd_clear(args) -> int:
    with _store() as store:
        store.clear(args.case_id)
    return 0


def cmd_serve(args) -> int:
    import uvicorn
    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=API_DEBUG)
    return 0


def cmd_elapsed(args) -> int:
    try:
        print(elapsed_since(args.month, args.year, args.date))
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


def cmd_deadline(args) -> int:
    try:
        start = datetime.fromisoformat(args.start)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    print(response_deadline(args.days, start, args.challenged).isoformat())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fairchance", description="Fair-chance hiring workflow tools")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="logging level (default: %(default)s)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create database tables").set_defaults(func=cmd_init_db)
    sub.add_parser("seed", help="store sample cases").set_defaults(func=cmd_seed)

    p = sub.add_parser("show", help="print a stored case record")
    p.add_argument("case_id", nargs="?", default=None)
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("clear", help="delete a stored case record")
    p.add_argument("case_id", nargs="?", default=None)
    p.set_defaults(func=cmd_clear)

    p = sub.add_parser("serve", help="run the HTTP API")
    p.add_argument("--host", default=API_HOST)
    p.add_argument("--port", type=int, default=API_PORT)
    p.set_defaults(func=cmd_serve)

    p = sub.add_parser("elapsed", help="time from a conviction month/year to a date")
    p.add_argument("month")
    p.add_argument("year")
    p.add_argument("date", help="reference date, YYYY-MM-DD")
    p.set_defaults(func=cmd_elapsed)

    p = sub.add_parser("deadline", help="end of a response window")
    p.add_argument("start", help="send time, ISO format")
    p.add_argument("days", type=int, help="business days in the window")
    p.add_argument("--challenged", action="store_true",
                   help="candidate challenged the report's accuracy (+5 business days)")
    p.set_defaults(func=cmd_deadline)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
