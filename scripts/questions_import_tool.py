from __future__ import annotations

import argparse
import asyncio
import csv
import re
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from sqlalchemy import delete, insert, select

from millionaire.db.models.game_questions import GameQuestion
from millionaire.db.models.questions import Question
from millionaire.db.session import SessionLocal
from millionaire.game.sessions.constants import QUESTION_LEVELS

REQUIRED_COLUMNS = {
    "level",
    "question",
    "answer1",
    "answer2",
    "answer3",
    "answer4",
}
ANSWER_COLUMNS = ("answer1", "answer2", "answer3", "answer4")


@dataclass(slots=True)
class ImportSummary:
    total_rows_read: int = 0
    total_rows_imported: int = 0
    skipped_not_ready: int = 0


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Import ladder questions from CSV files into the questions table.",
    )
    parser.add_argument("--input-dir", type=Path, default=Path("questions"))
    parser.add_argument(
        "--replace-all",
        action="store_true",
        help="Delete existing questions not bound to any game before import.",
    )
    parser.add_argument("--dry-run", action="store_true")
    return parser.parse_args(argv)


def _norm(value: Any) -> str:
    if value is None:
        return ""
    return re.sub(r"\s+", " ", str(value).strip().lower())


def _read_csv(path: Path) -> list[dict[str, str]]:
    with path.open("r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        fieldnames = set(reader.fieldnames or [])
        missing = sorted(REQUIRED_COLUMNS - fieldnames)
        if missing:
            missing_str = ", ".join(missing)
            raise ValueError(f"{path.name}: missing required columns: {missing_str}")
        return [dict(row) for row in reader]


def _parse_level(raw_level: str, *, location: str) -> int:
    stripped = raw_level.strip()
    if not stripped.isdigit() or int(stripped) not in QUESTION_LEVELS:
        raise ValueError(f"{location}: invalid level={raw_level!r}")
    return int(stripped)


def _build_records(
    input_dir: Path,
    *,
    now_utc: datetime,
) -> tuple[list[dict[str, Any]], ImportSummary, Counter[int]]:
    if not input_dir.exists():
        raise ValueError(f"input directory does not exist: {input_dir}")

    summary = ImportSummary()
    by_level = Counter[int]()
    records: list[dict[str, Any]] = []
    seen_texts: set[str] = set()

    files = sorted(p for p in input_dir.iterdir() if p.is_file() and p.suffix.lower() == ".csv")
    for path in files:
        rows = _read_csv(path)
        summary.total_rows_read += len(rows)
        for row_index, row in enumerate(rows, start=2):
            location = f"{path.name}:{row_index}"
            source_status = _norm(row.get("status", "ready"))
            if source_status not in {"", "ready", "active"}:
                summary.skipped_not_ready += 1
                continue

            question_text = (row.get("question") or "").strip()
            if not question_text:
                raise ValueError(f"{location}: empty question")
            if _norm(question_text) in seen_texts:
                raise ValueError(f"{location}: duplicate question in import set")
            seen_texts.add(_norm(question_text))

            answers = [(row.get(column) or "").strip() for column in ANSWER_COLUMNS]
            if not all(answers):
                raise ValueError(f"{location}: all answers must be non-empty")
            if len({_norm(answer) for answer in answers}) != len(answers):
                raise ValueError(f"{location}: answers must be distinct")

            level = _parse_level(row.get("level") or "", location=location)
            records.append(
                {
                    "level": level,
                    "text": question_text,
                    "answer1": answers[0],
                    "answer2": answers[1],
                    "answer3": answers[2],
                    "answer4": answers[3],
                    "created_at": now_utc,
                    "updated_at": now_utc,
                }
            )
            by_level[level] += 1

    summary.total_rows_imported = len(records)
    return records, summary, by_level


def _missing_levels(by_level: Counter[int]) -> list[int]:
    return [level for level in QUESTION_LEVELS if by_level[level] == 0]


def _chunks(rows: list[dict[str, Any]], size: int) -> list[list[dict[str, Any]]]:
    return [rows[index : index + size] for index in range(0, len(rows), size)]


async def _persist_records(records: list[dict[str, Any]], *, replace_all: bool) -> None:
    if not records:
        raise ValueError("no importable rows found")

    async with SessionLocal.begin() as session:
        if replace_all:
            bound_question_ids = select(GameQuestion.question_id).distinct()
            await session.execute(delete(Question).where(Question.id.not_in(bound_question_ids)))

        for chunk in _chunks(records, 1000):
            await session.execute(insert(Question), chunk)


async def _run(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    records, summary, by_level = _build_records(args.input_dir, now_utc=datetime.now(timezone.utc))

    if not args.dry_run:
        await _persist_records(records, replace_all=args.replace_all)

    level_stats = ", ".join(f"{level}={count}" for level, count in sorted(by_level.items()))
    print(  # noqa: T201
        "questions_import "
        f"rows_read={summary.total_rows_read} "
        f"rows_imported={summary.total_rows_imported} "
        f"skipped_not_ready={summary.skipped_not_ready} "
        f"replace_all={args.replace_all} "
        f"dry_run={args.dry_run}"
    )
    print(f"questions_import_by_level {level_stats}")  # noqa: T201
    missing = _missing_levels(by_level)
    if missing:
        print(f"questions_import_missing_levels {missing}")  # noqa: T201
    return 0


def main() -> int:
    return asyncio.run(_run())


if __name__ == "__main__":
    raise SystemExit(main())
