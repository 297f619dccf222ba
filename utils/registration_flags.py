"""Row-level flags inferred from free-text form answers."""

from __future__ import annotations

from typing import Optional

from domain.models.participant import Role
from utils.answers import mentions_any

# English and French words for the retreat bus / shuttle
TRANSPORT_KEYWORDS = ("bus", "autobus", "shuttle", "navette")

# Only the word "help" counts; "Yes"/"oui" alone do not make an organizer
HELP_KEYWORDS = ("help",)

ORGANIZER_ROLE = Role.setup_crew


def needs_transportation(answer: Optional[str]) -> bool:
    """True when the transportation answer mentions the bus or shuttle."""

    return mentions_any(answer, TRANSPORT_KEYWORDS)


def wants_to_help_organize(answer: Optional[str]) -> bool:
    """True when the organizer answer contains "help" (case-insensitive)."""

    return mentions_any(answer, HELP_KEYWORDS)
