"""One-off migration: JSON store (data/popups.json) -> SQL ``popups`` table.

Usage:
    python -m popup_api.db.migrate_json [--source data/popups.json] [--replace]
"""
from __future__ import annotations

import argparse
import json
from pathlib import Path

from sqlalchemy import delete

from popup_api.core.config import get_settings
from popup_api.db.create_tables import create_all
from popup_api.db.models import PopupRecord
from popup_api.db.session import get_session
from popup_api.domain.popups import id_key


def _load_json(path: Path) -> list:
    if not path.exists():
        raise SystemExit(f"File not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise SystemExit(f"{path} does not hold a JSON array")
    return data


def migrate(source: Path, *, replace: bool = False) -> int:
    """Copy every record in order, duplicates included. Returns the number of rows written."""
    popups = [p for p in _load_json(source) if isinstance(p, dict)]
    create_all()
    with get_session() as session:
        if replace:
            session.execute(delete(PopupRecord))
        for popup in popups:
            session.add(PopupRecord(popup_key=id_key(popup.get("id")), payload=popup))
        session.commit()
    return len(popups)


def main() -> None:
    ap = argparse.ArgumentParser(description="Copy the JSON popup store into DATABASE_URL")
    ap.add_argument("--source", default=get_settings().data_file, help="JSON store to read")
    ap.add_argument("--replace", action="store_true", help="empty the popups table first")
    args = ap.parse_args()
    count = migrate(Path(args.source), replace=args.replace)
    print(f"{count} popup(s) migrated.")


if __name__ == "__main__":
    main()
