from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Family(BaseModel):
    """Household derived from one form response row."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int = Field(..., ge=1)
    name: str = Field(..., min_length=1)
    primary_contact_id: str = Field(..., pattern=r"^p\d+_1$")
    phone: Optional[str] = None
    email: Optional[str] = None

    @field_validator("phone", "email", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        if v is None:
            return None
        s = str(v).strip()
        return s or None

    def to_dict(self) -> dict:
        """Serialize to the camelCase JSON shape (exclude None)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_dict(cls, doc: dict) -> "Family":
        return cls.model_validate(doc)
