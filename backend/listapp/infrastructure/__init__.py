"""Infrastructure Layer - storage, rendering and logging adapters.

Invariants:
    - Infrastructure never imports from api/
    - Driver and template exceptions are mapped to core/errors.py types here
"""
