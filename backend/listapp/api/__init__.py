"""API Layer - FastAPI routes, request context and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Handlers reach storage and templates only through AppContext
"""
