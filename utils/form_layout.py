# utils/form_layout.py
"""Header labels of the retreat registration form export.

The form asks "How many people are in your party" first and then branches:
every party width (1..7) has its own set of name/age/phone columns, each
header carrying an English label, a French label and a ``(Party of N)``
suffix on separate lines.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from utils.columns import ResolvedColumn, resolve_column

MIN_PARTY_SIZE = 1
MAX_PARTY_SIZE = 7

# ─────────────────────────────────────────────────────────────────────────────
# Row-level labels (same column for every party width)
# ─────────────────────────────────────────────────────────────────────────────
PARTY_SIZE_LABEL = "How many people are in your party"
EMAIL_LABEL = "Email Address"
TRANSPORT_LABEL = "How are you getting to/from the retreat"
HELP_ORGANIZE_LABEL = "Do you want to help organize the retreat"

_FIRST_NAME = "First Name\n(Prénom)"
_LAST_NAME = "Last Name\n(Nom de famille)"
_AGE_CATEGORY = "Age Category\n(Quelle catégorie d'âge ?)"


def _party_suffix(width: int) -> str:
    return f"(Party of {width})"


def _member_prefix(slot: int) -> str:
    return "Primary Contact" if slot == 1 else f"Person {slot}"


def phone_label(width: int) -> str:
    return f"Telephone\n{_party_suffix(width)}"


def first_name_label(slot: int, width: int) -> str:
    return f"{_member_prefix(slot)}: {_FIRST_NAME}\n{_party_suffix(width)}"


def last_name_label(slot: int, width: int) -> str:
    return f"{_member_prefix(slot)}: {_LAST_NAME}\n{_party_suffix(width)}"


def age_category_label(slot: int, width: int) -> str:
    return f"{_member_prefix(slot)}: {_AGE_CATEGORY}\n{_party_suffix(width)}"


# ─────────────────────────────────────────────────────────────────────────────
# Resolved column sets
# ─────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class MemberColumns:
    """Name and age columns of one member slot."""

    slot: int
    first_name: ResolvedColumn
    last_name: ResolvedColumn
    age_category: ResolvedColumn

    @property
    def has_name_columns(self) -> bool:
        return self.first_name.found and self.last_name.found


@dataclass(frozen=True)
class PartyColumns:
    """Every column read for a party of ``width`` people."""

    width: int
    phone: ResolvedColumn
    members: tuple[MemberColumns, ...]

    @property
    def primary(self) -> MemberColumns:
        return self.members[0]

    @property
    def additional(self) -> tuple[MemberColumns, ...]:
        return self.members[1:]

    @classmethod
    def resolve(cls, headers: Sequence[str], width: int) -> "PartyColumns":
        members = tuple(
            MemberColumns(
                slot=slot,
                first_name=resolve_column(headers, first_name_label(slot, width)),
                last_name=resolve_column(headers, last_name_label(slot, width)),
                age_category=resolve_column(headers, age_category_label(slot, width)),
            )
            for slot in range(1, width + 1)
        )
        return cls(width=width, phone=resolve_column(headers, phone_label(width)), members=members)


@dataclass(frozen=True)
class RowColumns:
    """Columns shared by all party widths."""

    email: ResolvedColumn
    transport: ResolvedColumn
    help_organize: ResolvedColumn

    @classmethod
    def resolve(cls, headers: Sequence[str]) -> "RowColumns":
        return cls(
            email=resolve_column(headers, EMAIL_LABEL),
            transport=resolve_column(headers, TRANSPORT_LABEL),
            help_organize=resolve_column(headers, HELP_ORGANIZE_LABEL),
        )


def party_columns_for(
    headers: Sequence[str],
    width: int,
    cache: Optional[dict[int, PartyColumns]] = None,
) -> PartyColumns:
    """Return (and memoize in ``cache``) the resolved columns for ``width``."""
    if cache is None:
        return PartyColumns.resolve(headers, width)
    if width not in cache:
        cache[width] = PartyColumns.resolve(headers, width)
    return cache[width]
