"""Result serializers: JSON, CSV, plain text and SQLite."""

from __future__ import annotations

import csv
import json
import sqlite3
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path
from typing import TextIO

from .errors import PersistenceError
from .models import Result, format_timestamp

CSV_FIELDS = ["Email", "Location", "Timestamp", "Source"]
OUTPUT_FORMATS = ("json", "csv", "txt")
FILENAME_TIME_FORMAT = "%Y%m%d_%H%M%S"
TXT_SEPARATOR = "---"

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS results (
    id INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT,
    emails TEXT,
    location TEXT,
    timestamp DATETIME,
    source TEXT
)
"""
INSERT_SQL = "INSERT INTO results (emails, location, timestamp, source) VALUES (?, ?, ?, ?)"


def _write_json(file_obj: TextIO, results: Sequence[Result]) -> None:
    json.dump([result.to_dict() for result in results], file_obj, indent=2)
    file_obj.write("\n")


def _write_csv(file_obj: TextIO, results: Sequence[Result]) -> None:
    writer = csv.writer(file_obj)
    writer.writerow(CSV_FIELDS)
    for result in results:
        timestamp = format_timestamp(result.timestamp)
        for email in result.emails:
            writer.writerow([email, result.location, timestamp, result.source])


def _write_txt(file_obj: TextIO, results: Sequence[Result]) -> None:
    for result in results:
        file_obj.write(f"Location: {result.location}\n")
        file_obj.write(f"Timestamp: {format_timestamp(result.timestamp)}\n")
        file_obj.write(f"Source: {result.source}\n")
        for email in result.emails:
            file_obj.write(f"Email: {email}\n")
        file_obj.write(f"{TXT_SEPARATOR}\n")


WRITERS: dict[str, Callable[[TextIO, Sequence[Result]], None]] = {
    "json": _write_json,
    "csv": _write_csv,
    "txt": _write_txt,
}


def results_filename(fmt: str, now: datetime) -> str:
    return f"results_{now.strftime(FILENAME_TIME_FORMAT)}.{fmt}"


def write_results(
    results: Sequence[Result],
    fmt: str,
    *,
    directory: str = ".",
    now: datetime | None = None,
) -> Path:
    """Write results to a timestamped file in the given format and return its path."""
    if not results:
        raise PersistenceError("no results to save")
    writer = WRITERS.get(fmt)
    if writer is None:
        raise PersistenceError(f"unsupported format: {fmt}")

    output_path = Path(directory) / results_filename(fmt, now or datetime.now())
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", newline="", encoding="utf-8") as file_obj:
            writer(file_obj, results)
    except OSError as exc:
        raise PersistenceError(f"failed to write {output_path}: {exc}") from exc
    return output_path


def save_results_to_db(results: Sequence[Result], db_path: str) -> int:
    """Insert one row per result into SQLite and return the number of rows written."""
    if not results:
        raise PersistenceError("no results to save")
    rows = [
        (
            ",".join(result.emails),
            result.location,
            format_timestamp(result.timestamp),
            result.source,
        )
        for result in results
    ]
    try:
        connection = sqlite3.connect(db_path)
        try:
            with connection:
                connection.execute(CREATE_TABLE_SQL)
                connection.executemany(INSERT_SQL, rows)
        finally:
            connection.close()
    except sqlite3.Error as exc:
        raise PersistenceError(f"failed to insert results into {db_path}: {exc}") from exc
    return len(rows)
