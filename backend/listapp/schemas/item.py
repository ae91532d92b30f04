"""Item Schemas - immutable view of a stored item.

Invariants:
    - ItemView is frozen: rendering cannot mutate storage state
    - Built from ORM rows via from_attributes
    - A NULL entry (possible in tables created out-of-band) reads as ""
"""

from pydantic import BaseModel, ConfigDict, field_validator


class ItemView(BaseModel):
    """Public-facing item data used by templates."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    entry: str

    @field_validator("entry", mode="before")
    @classmethod
    def null_entry_as_empty(cls, v):
        return "" if v is None else v
