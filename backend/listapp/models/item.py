"""Item ORM - one row per list entry.

Invariants:
    - id is an integer primary key assigned by storage, never reused
    - entry is free text; empty string is a legal value

Design Decisions:
    - sqlite_autoincrement: deleted ids are not handed out again when the
      table is created from this model
    - No timestamps or extra columns: the table layout is fixed and created out-of-band
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from listapp.db.base import Base


class Item(Base):
    """A single stored list entry."""
    __tablename__ = "items"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entry: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"Item(id={self.id!r}, entry={self.entry!r})"
