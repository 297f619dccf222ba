"""Small readers for free-text form answers (English and French)."""

from __future__ import annotations

from typing import Iterable, Optional

YES_NO_ANSWERS = {
    "yes": True,
    "oui": True,
    "true": True,
    "no": False,
    "non": False,
    "false": False,
}


def answer_text(value: object) -> str:
    """Lower-cased, stripped text of an answer; None reads as ''."""

    return str(value).strip().lower() if value is not None else ""


def parse_yes_no(value: object) -> Optional[bool]:
    """
    True/False for booleans and exact yes/no/true/false/oui/non answers.
    Anything else (including "Yes, I'd like to help") returns None.
    """

    if isinstance(value, bool):
        return value
    return YES_NO_ANSWERS.get(answer_text(value))


def mentions_any(value: object, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring test of the answer against ``keywords``."""

    text = answer_text(value)
    if not text:
        return False
    return any(k in text for k in keywords)
