from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from pymongo.collection import Collection

from config.database import mongodb
from config.settings import STATE_COLLECTION
from domain.models.family import Family
from domain.models.participant import Participant

PARTICIPANTS_KEY = "retreat-participants"
FAMILIES_KEY = "retreat-families"
LAST_UPDATED_KEY = "retreat-data-last-updated"

ALL_KEYS = (PARTICIPANTS_KEY, FAMILIES_KEY, LAST_UPDATED_KEY)


class RegistrationRepository:
    """Key-value store for the parsed registration state (one document per key)."""

    def __init__(self, collection: Optional[Collection] = None) -> None:
        self.collection: Collection = (
            collection if collection is not None else mongodb.collection(STATE_COLLECTION)
        )

    # ---------- raw key-value access ----------

    def _put(self, key: str, value: Any) -> None:
        self.collection.replace_one(
            {"_id": key},
            {"_id": key, "value": value, "updated_at": datetime.now(timezone.utc)},
            upsert=True,
        )

    def _get(self, key: str) -> Optional[Any]:
        doc = self.collection.find_one({"_id": key})
        return doc.get("value") if doc else None

    def _touch(self) -> None:
        self._put(LAST_UPDATED_KEY, datetime.now(timezone.utc).isoformat())

    # ---------- participants / families ----------

    def save_participants(self, participants: Iterable[Participant]) -> int:
        """Replace the stored participant list and stamp the update time."""
        docs = [p.to_dict() for p in participants]
        self._put(PARTICIPANTS_KEY, docs)
        self._touch()
        return len(docs)

    def save_families(self, families: Iterable[Family]) -> int:
        """Replace the stored family list and stamp the update time."""
        docs = [f.to_dict() for f in families]
        self._put(FAMILIES_KEY, docs)
        self._touch()
        return len(docs)

    def get_participants(self) -> Optional[List[Participant]]:
        """Stored participants, or None when nothing was saved yet."""
        docs = self._get(PARTICIPANTS_KEY)
        if docs is None:
            return None
        return [Participant.from_dict(doc) for doc in docs]

    def get_families(self) -> Optional[List[Family]]:
        """Stored families, or None when nothing was saved yet."""
        docs = self._get(FAMILIES_KEY)
        if docs is None:
            return None
        return [Family.from_dict(doc) for doc in docs]

    def get_last_updated(self) -> Optional[datetime]:
        raw = self._get(LAST_UPDATED_KEY)
        if not raw:
            return None
        try:
            return datetime.fromisoformat(str(raw))
        except ValueError:
            return None

    def clear(self) -> int:
        """Remove every stored registration key."""
        result = self.collection.delete_many({"_id": {"$in": list(ALL_KEYS)}})
        return result.deleted_count
