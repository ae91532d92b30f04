"""Pydantic Schemas - read models passed from storage to the renderer.

Invariants:
    - Schemas are immutable views; ORM objects never reach templates
"""
