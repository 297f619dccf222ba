from __future__ import annotations

from enum import StrEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class AgeGroup(StrEnum):
    adult = "adult"
    student = "student-15+"
    child_8_14 = "child-8-14"
    child_2_7 = "child-2-7"
    infant = "infant-0-2"


class Role(StrEnum):
    prayer_team = "prayer-team"
    food_crew = "food-crew"
    primary_contact = "primary-contact"
    worship_team = "worship-team"
    setup_crew = "setup-crew"
    cleanup_crew = "cleanup-crew"
    activities_coordinator = "activities-coordinator"
    transportation = "transportation"
    custom = "custom"


class AttendanceDays(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    friday: bool = False
    saturday: bool = False
    sunday: bool = False


class Attendance(BaseModel):
    """Which retreat days a participant attends."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    full_attendance: bool = True
    days: AttendanceDays = Field(default_factory=AttendanceDays)


class Participant(BaseModel):
    """One person of a registered party.

    ``id`` is ``p<row>_<slot>``: the 1-based data row of the form response and
    the member slot inside the party (slot 1 is the primary contact).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    # Identity / grouping
    id: str = Field(..., pattern=r"^p\d+_\d+$")
    name: str = Field(..., min_length=1)
    age_group: AgeGroup = AgeGroup.adult
    family_id: int = Field(..., ge=1)
    is_primary_contact: bool = False

    # Contact (primary contact only)
    phone: Optional[str] = None
    email: Optional[str] = None

    # Logistics
    roles: List[Role] = Field(default_factory=list)
    checked_in: bool = False
    needs_transportation: bool = False

    # Staff-managed profile
    age: Optional[int] = Field(default=None, ge=0)
    custom_role: Optional[str] = None
    color_team: Optional[str] = None
    comments: Optional[str] = None
    attendance: Optional[Attendance] = None

    # ---------- Validators ----------

    @field_validator("phone", "email", "custom_role", "color_team", "comments", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        # Treat empty or whitespace-only as None
        if v is None:
            return None
        s = str(v).strip()
        return s or None

    @field_validator("roles", mode="after")
    @classmethod
    def _dedupe_roles(cls, v: List[Role]) -> List[Role]:
        seen: set[str] = set()
        unique: List[Role] = []
        for role in v:
            if role not in seen:
                seen.add(role)
                unique.append(role)
        return unique

    @property
    def slot(self) -> int:
        """Member slot encoded in ``id`` (1 for the primary contact)."""
        return int(self.id.rsplit("_", 1)[1])

    def to_dict(self) -> dict:
        """Serialize to the camelCase JSON shape (exclude None)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_dict(cls, doc: dict) -> "Participant":
        """Hydrate from a stored/JSON document."""
        return cls.model_validate(doc)
