"""listapp - server-rendered list management.

Invariants:
    - Package root contains no executable code (no import side effects)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""

__version__ = "1.0.0"
