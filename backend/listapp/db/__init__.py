"""Database Infrastructure - SQLAlchemy declarative Base.

Invariants:
    - Single async engine per process (owned by DatabaseSessionManager)
    - All sessions are async (AsyncSession)
"""
