"""
Fair Chance
===========

A guided workflow for employers running the fair-chance hiring process:
individualized assessment, preliminary notice of intent to revoke, the
candidate's response window, reassessment, and the final notice.

Import structure
----------------
`import fairchance` is cheap: sub-modules are imported on demand.  The
database layer (:pymod:`fairchance.db`, :pymod:`fairchance.store_db`) and
the HTTP layer (the top-level ``api`` package) are only loaded when you
ask for them.

Sub-modules
~~~~~~~~~~~
- :pymod:`fairchance.dates`      – elapsed time, business days, response countdown
- :pymod:`fairchance.models`     – ``CaseRecord`` + answer enums
- :pymod:`fairchance.forms`      – per-stage form validation
- :pymod:`fairchance.letters`    – plain-text notice letters (Jinja2)
- :pymod:`fairchance.store`      – ``FormStore`` persistence contract + in-memory store
- :pymod:`fairchance.store_db`   – SQLite-backed ``DBFormStore``
- :pymod:`fairchance.lifecycle`  – phase state machine (`advance`)
- :pymod:`fairchance.events`     – clock, simulated sender, simulated response
- :pymod:`fairchance.stages`     – the four workflow stages
- :pymod:`fairchance.workflow`   – ``Workflow`` dispatcher for one case

Quick start
-----------
>>> from fairchance.store import MemoryFormStore
>>> from fairchance.workflow import Workflow
>>> wf = Workflow(MemoryFormStore())
>>> wf.phase.name
'ASSESSMENT'

"""

__all__ = [
    "dates",
    "models",
    "forms",
    "letters",
    "store",
    "store_db",
    "lifecycle",
    "events",
    "stages",
    "workflow",
]

__version__ = "0.1.0"
