# services/registration_parser.py
"""
================================================================================
Registration Grid Parser
================================================================================

Turns the raw values of the registration form sheet (header row + one row
per submitted response) into ``Participant`` and ``Family`` records.

Each response row declares a party size (1..7) and only the columns of that
party width are filled in, so the row is read in four steps:

1. Party size (row skipped when missing, non-numeric or outside 1..7)
2. Primary contact (slot 1; row skipped when both names are blank)
3. Additional members (slots 2..N, each one optional, never renumbered)
4. Row-level flags (shuttle keywords, "help organize" answer)

``parse_participants`` and ``parse_families`` walk the rows through the same
generator, so a family id always designates the same row in both outputs.
The id counter lives inside a single call and advances for every row with
a valid party size, even if that row ends up emitting nothing.

================================================================================
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from config.settings import DEBUG_PRINT
from domain.models.family import Family
from domain.models.participant import Participant
from middleware.errors import RegistrationParseError
from utils.age_groups import map_age_group
from utils.columns import ResolvedColumn, resolve_column
from utils.form_layout import (
    MAX_PARTY_SIZE,
    MIN_PARTY_SIZE,
    PARTY_SIZE_LABEL,
    MemberColumns,
    PartyColumns,
    RowColumns,
    party_columns_for,
)
from utils.registration_flags import (
    ORGANIZER_ROLE,
    needs_transportation,
    wants_to_help_organize,
)

logger = logging.getLogger(__name__)
if DEBUG_PRINT:
    logger.setLevel(logging.DEBUG)

Grid = Sequence[Sequence[object]]

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


# ==============================================================================
# 1. Row helpers
# ==============================================================================

def participant_id(row_index: int, slot: int) -> str:
    """``p<row>_<slot>`` identifier shared by participants and families."""
    return f"p{row_index}_{slot}"


def parse_party_size(value: object) -> Optional[int]:
    """
    Leading integer of the party size answer ("3", "3 people"), or None
    when absent, non-numeric or outside 1..7.
    """
    if value is None:
        return None
    match = _LEADING_INT_RE.match(str(value))
    if not match:
        return None
    size = int(match.group(1))
    if not MIN_PARTY_SIZE <= size <= MAX_PARTY_SIZE:
        return None
    return size


def _join_name(first: str, last: str) -> str:
    return f"{first} {last}".strip()


@dataclass(frozen=True)
class MemberName:
    slot: int
    first: str
    last: str
    age_category: str

    @property
    def full_name(self) -> str:
        return _join_name(self.first, self.last)


def _read_member(row: Sequence[object], columns: MemberColumns) -> Optional[MemberName]:
    """Names and age answer of one slot, or None when the slot is empty."""
    if not columns.has_name_columns:
        return None
    first = columns.first_name.cell(row)
    last = columns.last_name.cell(row)
    if not (first or last):
        return None
    return MemberName(columns.slot, first, last, columns.age_category.cell(row))


@dataclass(frozen=True)
class PartyRow:
    """One response row with a valid party size, ready to be turned into entities."""

    row_index: int
    family_id: int
    party_size: int
    row: Sequence[object]
    columns: PartyColumns
    shared: RowColumns

    @property
    def primary(self) -> Optional[MemberName]:
        return _read_member(self.row, self.columns.primary)

    def additional_members(self) -> Iterator[MemberName]:
        for member_columns in self.columns.additional:
            member = _read_member(self.row, member_columns)
            if member is None:
                logger.info("Row %d: slot %d has no name, skipped", self.row_index, member_columns.slot)
                continue
            yield member

    @property
    def phone(self) -> str:
        return self.columns.phone.cell(self.row)

    @property
    def email(self) -> str:
        return self.shared.email.cell(self.row)

    @property
    def needs_transportation(self) -> bool:
        return needs_transportation(self.shared.transport.cell(self.row))

    @property
    def wants_to_help(self) -> bool:
        return wants_to_help_organize(self.shared.help_organize.cell(self.row))


# ==============================================================================
# 2. Shared traversal
# ==============================================================================

def _party_size_column(grid: Optional[Grid], operation: str) -> Optional[ResolvedColumn]:
    """Locate the party size column, or None when there is nothing to parse."""
    if not grid or len(grid) <= 1:
        logger.info("%s: no data rows in sheet data", operation)
        return None
    column = resolve_column(grid[0], PARTY_SIZE_LABEL)
    if not column.found:
        logger.info("%s: party size column %r not found", operation, PARTY_SIZE_LABEL)
        return None
    return column


def _iter_parties(grid: Grid, party_size_column: ResolvedColumn) -> Iterator[PartyRow]:
    headers = grid[0]
    shared = RowColumns.resolve(headers)
    width_cache: dict[int, PartyColumns] = {}
    next_family_id = 1

    for row_index in range(1, len(grid)):
        row = grid[row_index]
        if not row:
            logger.info("Row %d: empty, skipped", row_index)
            continue

        raw_size = party_size_column.cell(row)
        party_size = parse_party_size(raw_size)
        if party_size is None:
            logger.info("Row %d: invalid party size %r, skipped", row_index, raw_size)
            continue

        family_id = next_family_id
        next_family_id += 1
        logger.debug("Row %d: party of %d, family id %d", row_index, party_size, family_id)

        yield PartyRow(
            row_index=row_index,
            family_id=family_id,
            party_size=party_size,
            row=row,
            columns=party_columns_for(headers, party_size, width_cache),
            shared=shared,
        )


# ==============================================================================
# 3. Entity builders
# ==============================================================================

def _participants_from_party(party: PartyRow) -> List[Participant]:
    primary = party.primary
    if primary is None:
        logger.info("Row %d: primary contact has no name, skipped", party.row_index)
        return []

    needs_ride = party.needs_transportation
    out = [
        Participant(
            id=participant_id(party.row_index, 1),
            name=primary.full_name,
            age_group=map_age_group(primary.age_category),
            family_id=party.family_id,
            roles=[ORGANIZER_ROLE] if party.wants_to_help else [],
            checked_in=False,
            phone=party.phone,
            email=party.email,
            is_primary_contact=True,
            needs_transportation=needs_ride,
        )
    ]
    for member in party.additional_members():
        out.append(
            Participant(
                id=participant_id(party.row_index, member.slot),
                name=member.full_name,
                age_group=map_age_group(member.age_category),
                family_id=party.family_id,
                roles=[],
                checked_in=False,
                is_primary_contact=False,
                needs_transportation=needs_ride,
            )
        )
    return out


def _family_from_party(party: PartyRow) -> Optional[Family]:
    primary = party.primary
    if primary is None:
        return None

    if party.party_size > 1:
        name = f"{primary.last or primary.first} Family"
    else:
        name = primary.full_name

    return Family(
        id=party.family_id,
        name=name,
        primary_contact_id=participant_id(party.row_index, 1),
        phone=party.phone,
        email=party.email,
    )


# ==============================================================================
# 4. Public API
# ==============================================================================

def parse_participants(grid: Optional[Grid]) -> List[Participant]:
    """Every participant of every valid party in ``grid``."""
    operation = "parse_participants"
    try:
        party_size_column = _party_size_column(grid, operation)
        if party_size_column is None:
            return []

        participants: List[Participant] = []
        for party in _iter_parties(grid, party_size_column):
            participants.extend(_participants_from_party(party))
    except Exception as exc:
        raise RegistrationParseError(
            f"Failed to parse participants: {exc}",
            details={"operation": operation},
        ) from exc

    logger.info("%s: %d participants parsed", operation, len(participants))
    return participants


def parse_families(grid: Optional[Grid]) -> List[Family]:
    """One family per valid party whose primary contact has a name."""
    operation = "parse_families"
    try:
        party_size_column = _party_size_column(grid, operation)
        if party_size_column is None:
            return []

        families: List[Family] = []
        for party in _iter_parties(grid, party_size_column):
            family = _family_from_party(party)
            if family is not None:
                families.append(family)
    except Exception as exc:
        raise RegistrationParseError(
            f"Failed to parse families: {exc}",
            details={"operation": operation},
        ) from exc

    logger.info("%s: %d families parsed", operation, len(families))
    return families


__all__ = [
    "PartyRow",
    "parse_families",
    "parse_participants",
    "parse_party_size",
    "participant_id",
]
