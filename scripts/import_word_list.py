"""Sync a published word list into the local store, or export progress."""
from __future__ import annotations

import json
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parent.parent))

from flashcards.config import settings
from flashcards.db import models  # noqa: F401
from flashcards.db.base import Base
from flashcards.db.session import engine, get_db_context
from flashcards.services.word_data import WordDataService


def import_word_list(path: Path, force: bool = False) -> int:
    """Replace the local words with ``path`` when its version changed."""

    db = get_db_context()
    try:
        result = WordDataService(db).sync_from_file(path, force=force)
    finally:
        db.close()

    if result.error:
        print(f"Nothing imported: {result.error}")
        return 0
    if not result.replaced:
        print(f"Already at version {result.version}, nothing to do")
        return 0
    print(
        f"Imported {result.imported} words (skipped {result.skipped}), "
        f"version {result.previous_version} -> {result.version}"
    )
    return result.imported


def export_progress(output_path: Path) -> Path:
    db = get_db_context()
    try:
        document = WordDataService(db).export(device_type="cli")
    finally:
        db.close()

    with open(output_path, "w", encoding="utf-8") as file:
        json.dump(document.model_dump(mode="json", by_alias=True), file, ensure_ascii=False, indent=2)

    print(f"Exported {document.export_metadata.total_words} words to {output_path}")
    return output_path


if __name__ == "__main__":  # pragma: no cover - CLI execution
    import argparse

    parser = argparse.ArgumentParser(description="Sync or export the flashcard word list")
    parser.add_argument(
        "--file",
        type=Path,
        default=settings.WORD_LIST_PATH,
        help="Versioned word list JSON to import",
    )
    parser.add_argument("--force", action="store_true", help="Replace even when versions match")
    parser.add_argument("--export", type=Path, help="Write a progress backup to this path instead")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables first (SQLite development)",
    )

    args = parser.parse_args()

    if args.create_tables:
        Base.metadata.create_all(bind=engine)

    if args.export:
        export_progress(args.export)
    elif args.file.exists():
        import_word_list(args.file, force=args.force)
    else:
        parser.error(f"Word list not found: {args.file}")
