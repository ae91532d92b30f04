"""Core Layer - pure definitions shared by every other layer.

Invariants:
    - No module in core/ imports from api/, infrastructure/, or db/
    - Nothing here performs IO
"""
