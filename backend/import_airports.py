#!/usr/bin/env python3
"""
Import airport reference data into Supabase.

Reads every `<region>_airports.json` file in a directory and inserts the
rows into the `airports` table, tagging each with its region label.

Usage:
    uv run python import_airports.py data/airports
    uv run python import_airports.py data/airports --dry-run
"""

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from modules.airports.importer import load_airport_file
from shared.database import get_supabase_client

console = Console()

BATCH_SIZE = 500


def insert_rows(client, rows: list[dict]) -> int:
    """Insert rows into the airports table in batches; returns rows written."""
    written = 0
    for start in range(0, len(rows), BATCH_SIZE):
        batch = rows[start:start + BATCH_SIZE]
        client.table("airports").insert(batch).execute()
        written += len(batch)
    return written


def main():
    parser = argparse.ArgumentParser(description="Import airport JSON files into Supabase")
    parser.add_argument("directory", type=Path, help="Directory holding *_airports.json files")
    parser.add_argument("--dry-run", action="store_true", help="Parse files and report counts only")
    args = parser.parse_args()

    files = sorted(args.directory.glob("*.json"))
    if not files:
        console.print(f"[red]Error:[/red] No JSON files found in {args.directory}")
        sys.exit(1)

    client = None if args.dry_run else get_supabase_client()

    table = Table(title="Airport Import")
    table.add_column("File", style="cyan")
    table.add_column("Region")
    table.add_column("Airports", justify="right")

    total = 0
    for path in files:
        try:
            rows = load_airport_file(path)
        except ValueError as e:
            console.print(f"[red]✗[/red] {path.name}: {e}")
            continue

        region = rows[0]["region"] if rows else "-"
        count = len(rows) if client is None else insert_rows(client, rows)
        total += count
        table.add_row(path.name, region, str(count))

    console.print(table)
    verb = "Parsed" if args.dry_run else "Imported"
    console.print(f"[green]{verb} {total} airport(s).[/green]")


if __name__ == "__main__":
    main()
