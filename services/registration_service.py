"""Registration state: import, check-in, staff edits and logistics summaries."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from domain.models.family import Family
from domain.models.participant import AgeGroup, Participant
from middleware.errors import RecordNotFoundError, ValidationError
from repositories.registration_repository import RegistrationRepository
from services.registration_parser import parse_families, parse_participants
from services.sheets_service import fetch_sheet_values

logger = logging.getLogger(__name__)

# camelCase payload keys staff may change through the dashboard
EDITABLE_FIELDS = frozenset(
    {"roles", "customRole", "colorTeam", "checkedIn", "comments", "attendance", "age"}
)

UNKNOWN_FAMILY_NAME = "Unknown family"


# ==============================================================================
# Import
# ==============================================================================

def import_grid(
    grid: Sequence[Sequence[object]],
    repo: Optional[RegistrationRepository] = None,
) -> Dict[str, int]:
    """Parse ``grid`` into participants and families and persist both lists."""
    participants = parse_participants(grid)
    families = parse_families(grid)

    repo = repo or RegistrationRepository()
    repo.save_participants(participants)
    repo.save_families(families)

    logger.info("Imported %d participants in %d families", len(participants), len(families))
    return {
        "rows": max(len(grid) - 1, 0) if grid else 0,
        "participants": len(participants),
        "families": len(families),
    }


def refresh_from_sheet(
    repo: Optional[RegistrationRepository] = None,
    fetcher: Callable[[], List[List[str]]] = fetch_sheet_values,
) -> Dict[str, int]:
    """Fetch the live sheet and replace the stored registration state."""
    return import_grid(fetcher(), repo)


def load_state(repo: Optional[RegistrationRepository] = None) -> tuple[List[Participant], List[Family]]:
    """Stored participants and families (empty lists when nothing is stored)."""
    repo = repo or RegistrationRepository()
    return repo.get_participants() or [], repo.get_families() or []


# ==============================================================================
# Check-in
# ==============================================================================

@dataclass
class FamilyGroup:
    id: int
    family: str
    members: List[Participant] = field(default_factory=list)

    @property
    def checked_in_count(self) -> int:
        return sum(1 for m in self.members if m.checked_in)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "family": self.family,
            "members": [
                {"id": m.id, "name": m.name, "checkedIn": m.checked_in}
                for m in self.members
            ],
        }


def build_family_groups(
    participants: Sequence[Participant],
    families: Sequence[Family],
) -> List[FamilyGroup]:
    """
    Join participants to families on family id, in family order.

    Participants whose family id matches no family are kept in trailing
    groups named ``UNKNOWN_FAMILY_NAME``.
    """
    groups: Dict[int, FamilyGroup] = {f.id: FamilyGroup(f.id, f.name) for f in families}
    orphans: Dict[int, FamilyGroup] = {}

    for participant in participants:
        group = groups.get(participant.family_id)
        if group is None:
            group = orphans.setdefault(
                participant.family_id,
                FamilyGroup(participant.family_id, UNKNOWN_FAMILY_NAME),
            )
        group.members.append(participant)

    if orphans:
        logger.warning("%d participant families have no family record", len(orphans))
    return list(groups.values()) + list(orphans.values())


def check_in_summary(participants: Sequence[Participant]) -> Dict[str, int]:
    total = len(participants)
    checked_in = sum(1 for p in participants if p.checked_in)
    return {"total": total, "checkedIn": checked_in, "remaining": total - checked_in}


def _find_index(participants: Sequence[Participant], participant_id: str) -> int:
    for index, participant in enumerate(participants):
        if participant.id == participant_id:
            return index
    raise RecordNotFoundError(
        f"Participant {participant_id} not found",
        details={"participant_id": participant_id},
    )


def update_participant(
    participant_id: str,
    changes: Mapping[str, Any],
    repo: Optional[RegistrationRepository] = None,
) -> Participant:
    """Apply staff edits (see ``EDITABLE_FIELDS``) to one stored participant."""
    if not isinstance(changes, Mapping):
        raise ValidationError("Invalid participant data")

    unknown = sorted(k for k in changes if k not in EDITABLE_FIELDS and k != "id")
    if unknown:
        raise ValidationError(
            "Fields cannot be edited: " + ", ".join(unknown),
            details={"fields": unknown},
        )

    repo = repo or RegistrationRepository()
    participants = repo.get_participants() or []
    index = _find_index(participants, participant_id)

    data = participants[index].to_dict()
    for key, value in changes.items():
        if key in EDITABLE_FIELDS:
            data[key] = value
    try:
        updated = Participant.from_dict(data)
    except PydanticValidationError as exc:
        raise ValidationError(
            "Invalid participant data",
            details={"errors": exc.errors(include_url=False, include_context=False)},
        ) from exc

    participants[index] = updated
    repo.save_participants(participants)
    return updated


def set_checked_in(
    participant_id: str,
    checked_in: bool,
    repo: Optional[RegistrationRepository] = None,
) -> Participant:
    return update_participant(participant_id, {"checkedIn": bool(checked_in)}, repo)


def toggle_check_in(
    participant_id: str,
    repo: Optional[RegistrationRepository] = None,
) -> Participant:
    repo = repo or RegistrationRepository()
    participants = repo.get_participants() or []
    current = participants[_find_index(participants, participant_id)]
    return set_checked_in(participant_id, not current.checked_in, repo)


def set_family_checked_in(
    family_id: int,
    checked_in: bool,
    repo: Optional[RegistrationRepository] = None,
) -> List[Participant]:
    """Check a whole family in (or out) with a single save; returns its members."""
    repo = repo or RegistrationRepository()
    participants = repo.get_participants() or []

    members: List[Participant] = []
    for index, participant in enumerate(participants):
        if participant.family_id == family_id:
            participants[index] = participant.model_copy(update={"checked_in": bool(checked_in)})
            members.append(participants[index])

    if not members:
        raise RecordNotFoundError(
            f"Family {family_id} has no participants",
            details={"family_id": family_id},
        )

    repo.save_participants(participants)
    logger.info("Family %d: %d members checked %s", family_id, len(members), "in" if checked_in else "out")
    return members


# ==============================================================================
# Logistics summaries
# ==============================================================================

def meal_counts(participants: Sequence[Participant]) -> Dict[str, int]:
    """Headcount per age group, every group present, plus ``total``."""
    counts = Counter(p.age_group for p in participants)
    out = {group.value: counts.get(group.value, 0) for group in AgeGroup}
    out["total"] = len(participants)
    return out


def transportation_roster(
    participants: Sequence[Participant],
    families: Sequence[Family],
) -> List[Dict[str, Any]]:
    """Families with members who asked for the shuttle, with a contact phone."""
    by_id = {f.id: f for f in families}
    roster: Dict[int, Dict[str, Any]] = {}

    for participant in participants:
        if not participant.needs_transportation:
            continue
        family = by_id.get(participant.family_id)
        entry = roster.setdefault(
            participant.family_id,
            {
                "familyId": participant.family_id,
                "family": family.name if family else UNKNOWN_FAMILY_NAME,
                "phone": family.phone if family else None,
                "members": [],
            },
        )
        entry["members"].append({"id": participant.id, "name": participant.name})

    for entry in roster.values():
        entry["count"] = len(entry["members"])
    return list(roster.values())
