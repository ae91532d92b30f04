"""Route Modules - one file per concern.

Invariants:
    - Each module defines its own APIRouter
    - Routes hold no SQL and no markup (delegate to repository/renderer)
"""
