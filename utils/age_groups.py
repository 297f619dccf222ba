"""Free-text age category -> ``AgeGroup``."""

from __future__ import annotations

from typing import Optional

from domain.models.participant import AgeGroup
from utils.answers import mentions_any

# Evaluated top to bottom; the first signature with a matching keyword wins.
AGE_GROUP_SIGNATURES: tuple[tuple[tuple[str, ...], AgeGroup], ...] = (
    (("adult", "adulte"), AgeGroup.adult),
    (("teen", "ado", "15+", "student"), AgeGroup.student),
    (("8-14", "8 to 14"), AgeGroup.child_8_14),
    (("2-7", "2 to 7"), AgeGroup.child_2_7),
    (("0-2", "0 to 2", "infant", "bébé"), AgeGroup.infant),
)

DEFAULT_AGE_GROUP = AgeGroup.adult


def map_age_group(category: Optional[str]) -> AgeGroup:
    """Map the form's age category answer to an ``AgeGroup`` (adult if unknown)."""

    for keywords, group in AGE_GROUP_SIGNATURES:
        if mentions_any(category, keywords):
            return group
    return DEFAULT_AGE_GROUP


__all__ = ["AGE_GROUP_SIGNATURES", "DEFAULT_AGE_GROUP", "map_age_group"]
