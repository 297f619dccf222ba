import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Ensure project root is on sys.path
sys.path.append(str(Path(__file__).resolve().parents[1]))

from repositories.registration_repository import RegistrationRepository
from utils.form_layout import (
    EMAIL_LABEL,
    age_category_label,
    first_name_label,
    last_name_label,
    phone_label,
)

PARTY_SIZE_HEADER = "How many people are in your party?\n(Combien de personnes dans votre groupe ?)"
TRANSPORT_HEADER = "How are you getting to/from the retreat?\n(Comment venez-vous à la retraite ?)"
HELP_HEADER = "Do you want to help organize the retreat?\n(Voulez-vous aider à organiser ?)"


class DummyCollection:
    """In-memory stand-in for the key-value Mongo collection."""

    def __init__(self):
        self.docs = {}

    def replace_one(self, flt, doc, upsert=False):
        key = flt["_id"]
        if key in self.docs or upsert:
            self.docs[key] = dict(doc)

    def find_one(self, flt):
        doc = self.docs.get(flt["_id"])
        return dict(doc) if doc is not None else None

    def delete_many(self, flt):
        keys = [k for k in flt["_id"]["$in"] if k in self.docs]
        for key in keys:
            del self.docs[key]
        return SimpleNamespace(deleted_count=len(keys))


def _build_headers(max_width: int = 3) -> list[str]:
    headers = ["Timestamp", EMAIL_LABEL, PARTY_SIZE_HEADER]
    for width in range(1, max_width + 1):
        headers.append(phone_label(width))
        for slot in range(1, width + 1):
            headers.append(first_name_label(slot, width))
            headers.append(last_name_label(slot, width))
            headers.append(age_category_label(slot, width))
    headers += [TRANSPORT_HEADER, HELP_HEADER]
    return headers


@pytest.fixture
def headers():
    """Header row of a form export with column sets for parties of 1 to 3."""
    return _build_headers()


@pytest.fixture
def make_row(headers):
    """
    Build a data row from ``{header: value}``; trailing blanks are dropped the
    way the Sheets API drops them.
    """

    def _make(values: dict) -> list[str]:
        row = [""] * len(headers)
        for header, value in values.items():
            row[headers.index(header)] = value
        while row and row[-1] == "":
            row.pop()
        return row

    return _make


@pytest.fixture
def party_row(make_row):
    """
    Row for a party of ``len(members)``; ``members`` is a list of
    ``(first, last, age)`` tuples, slot order.
    """

    def _party(members, *, size=None, email="", phone="", transport="", help_answer=""):
        width = len(members)
        values = {
            PARTY_SIZE_HEADER: str(size if size is not None else width),
            EMAIL_LABEL: email,
            TRANSPORT_HEADER: transport,
            HELP_HEADER: help_answer,
        }
        if width:
            values[phone_label(width)] = phone
        for slot, (first, last, age) in enumerate(members, start=1):
            values[first_name_label(slot, width)] = first
            values[last_name_label(slot, width)] = last
            values[age_category_label(slot, width)] = age
        return make_row(values)

    return _party


@pytest.fixture
def collection():
    return DummyCollection()


@pytest.fixture
def repo(collection):
    return RegistrationRepository(collection=collection)
