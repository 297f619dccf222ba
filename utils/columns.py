"""Header lookup for form-response sheets.

Header cells of the registration sheet are bilingual and multi-line, e.g.
``"Primary Contact: First Name\\n(Prénom)\\n(Party of 3)"``. Patterns are
matched against that raw text, newlines included.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence, Union

logger = logging.getLogger(__name__)

NOT_FOUND = -1

Pattern = Union[str, "re.Pattern[str]"]


def _describe(pattern: Pattern) -> str:
    if isinstance(pattern, re.Pattern):
        return f"/{pattern.pattern}/"
    return repr(pattern)


def locate_column(headers: Optional[Sequence[str]], pattern: Pattern) -> int:
    """Return the index of the first header matching ``pattern`` or ``NOT_FOUND``.

    A ``str`` pattern matches by (case-sensitive) substring containment, a
    compiled regex matches when ``search`` finds it anywhere in the header.
    Empty header cells never match.
    """

    if not headers:
        logger.debug("No headers provided while looking for %s", _describe(pattern))
        return NOT_FOUND

    if isinstance(pattern, re.Pattern):
        matches = pattern.search
    else:
        matches = lambda header: pattern in header  # noqa: E731

    for index, header in enumerate(headers):
        if header and matches(header):
            logger.debug("Column %s found at index %d", _describe(pattern), index)
            return index

    logger.debug("Column %s not found", _describe(pattern))
    return NOT_FOUND


@dataclass(frozen=True)
class ResolvedColumn:
    """Result of a header lookup; ``index`` is None when the column is absent."""

    pattern: str
    index: Optional[int] = None

    @property
    def found(self) -> bool:
        return self.index is not None

    def cell(self, row: Sequence[object]) -> str:
        """Stripped cell text for ``row``; absent columns and short rows read as ''."""
        if self.index is None or self.index >= len(row):
            return ""
        value = row[self.index]
        if value is None:
            return ""
        if not isinstance(value, (str, int, float)):
            raise TypeError(
                f"unexpected {type(value).__name__} in column {self.pattern!r}"
            )
        return str(value).strip()


def resolve_column(headers: Optional[Sequence[str]], pattern: Pattern) -> ResolvedColumn:
    """Locate ``pattern`` in ``headers`` and wrap the outcome."""

    index = locate_column(headers, pattern)
    label = pattern.pattern if isinstance(pattern, re.Pattern) else pattern
    return ResolvedColumn(label, None if index == NOT_FOUND else index)


__all__ = ["NOT_FOUND", "ResolvedColumn", "locate_column", "resolve_column"]
