"""
Happy Thoughts API: Application Package
=======================================

What: Marks `happythoughts` as the importable backend package.
Who:  Imported by uvicorn (`happythoughts.main:app`), Alembic and pytest.

Layering:
    ┌─────────────────────────────────────┐
    │        Routes (HTTP shell)          │  ← status codes, headers, auth wiring
    ├─────────────────────────────────────┤
    │   Services (thoughts, credentials)  │  ← validation, ownership, queries
    ├─────────────────────────────────────┤
    │   Stores (abstract + SQLAlchemy)    │  ← find/sort/skip/limit/update/delete
    ├─────────────────────────────────────┤
    │        Database (sessions)          │  ← async engine, session per request
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
