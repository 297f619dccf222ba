#!/usr/bin/env python3
"""Parse a downloaded form-response export and print the derived records.

Usage::

    python -m scripts.parse_export responses.csv            # JSON to stdout
    python -m scripts.parse_export responses.xlsx --store   # also save to Mongo

Nothing is written to the database unless ``--store`` is given.
"""

from __future__ import annotations

import argparse
import json
import sys

from services.grid_loader import load_grid
from services.registration_parser import parse_families, parse_participants


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("path", help="Exported .csv or .xlsx file")
    parser.add_argument("--sheet", help="Worksheet name (xlsx only, default first)")
    parser.add_argument("--store", action="store_true", help="Save the result to MongoDB")
    args = parser.parse_args(argv)

    grid = load_grid(args.path, sheet=args.sheet)
    participants = parse_participants(grid)
    families = parse_families(grid)

    if args.store:
        from repositories.registration_repository import RegistrationRepository

        repo = RegistrationRepository()
        repo.save_participants(participants)
        repo.save_families(families)

    json.dump(
        {
            "participants": [p.to_dict() for p in participants],
            "families": [f.to_dict() for f in families],
        },
        sys.stdout,
        ensure_ascii=False,
        indent=2,
    )
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution only
    sys.exit(main())
