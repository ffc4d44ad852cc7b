#!/usr/bin/env python3
"""
Tasting Log Management Utility

Add, list, and remove wines and sakes in the CSV store.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tastelog.config import DATA_DIR
from tastelog.constants import SakeType
from tastelog.error_handling import DataValidationError, RecordNotFoundError, RecordStoreError
from tastelog.store import CsvRecordStore
from tastelog.utils import setup_logging

console = Console()


async def list_records(store: CsvRecordStore):
    """List wines and sakes, newest first."""
    wines = await store.wines.list()
    sakes = await store.sakes.list()

    console.print(f"\n[bold]🍷 Wines[/bold] ({len(wines)})")
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", width=10)
    table.add_column("Name", style="cyan", width=30)
    table.add_column("Region", width=18)
    table.add_column("Grape", width=18)
    table.add_column("Vintage", justify="center", width=8)
    table.add_column("Rating", justify="center", width=7)
    for wine in wines:
        table.add_row(
            wine.id[:8],
            wine.name[:30],
            wine.region or "-",
            wine.grape or "-",
            str(wine.vintage) if wine.vintage else "NV",
            "★" * wine.rating
        )
    console.print(table)

    console.print(f"\n[bold]🍶 Sakes[/bold] ({len(sakes)})")
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", width=10)
    table.add_column("Name", style="cyan", width=30)
    table.add_column("Brewery", width=18)
    table.add_column("Type", width=12)
    table.add_column("Region", width=12)
    table.add_column("Rating", justify="center", width=7)
    for sake in sakes:
        table.add_row(
            sake.id[:8],
            sake.name[:30],
            sake.brewery or "-",
            sake.type or "-",
            sake.region or "-",
            "★" * sake.rating
        )
    console.print(table)
    console.print()


def _resolve_id(collection, prefix: str) -> str:
    """Expand a short id prefix (as shown by `list`) to a full record id."""
    matches = [record.id for record in collection.all() if record.id.startswith(prefix)]
    if len(matches) != 1:
        raise RecordNotFoundError(f"No unique {collection.label} matches id '{prefix}'")
    return matches[0]


async def remove_record(store: CsvRecordStore, kind: str, record_id: str, force: bool):
    collection = store.wines if kind == "wine" else store.sakes
    full_id = _resolve_id(collection, record_id)
    record = await collection.get(full_id)

    if not force and not Confirm.ask(f"Remove {kind} '{record.name}'?"):
        console.print("[yellow]Cancelled[/yellow]")
        return

    await collection.delete(full_id)
    console.print(f"[green]✓[/green] Removed {kind} '{record.name}'")


async def run(args) -> None:
    store = CsvRecordStore(args.data_dir)

    if args.command == "list":
        await list_records(store)

    elif args.command == "add-wine":
        wine = await store.wines.create({
            "name": args.name,
            "region": args.region,
            "grape": args.grape,
            "vintage": args.vintage,
            "rating": args.rating,
            "notes": args.notes,
        })
        console.print(f"[green]✓[/green] Added wine '{wine.name}' ({wine.id[:8]})")

    elif args.command == "add-sake":
        sake = await store.sakes.create({
            "name": args.name,
            "brewery": args.brewery,
            "type": args.type,
            "region": args.region,
            "rating": args.rating,
            "notes": args.notes,
        })
        console.print(f"[green]✓[/green] Added sake '{sake.name}' ({sake.id[:8]})")

    elif args.command == "remove":
        await remove_record(store, args.kind, args.id, args.force)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage your tasting log")
    parser.add_argument("--data-dir", default=DATA_DIR, help="Directory holding wines.csv and sakes.csv")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List all records")

    add_wine = subparsers.add_parser("add-wine", help="Add a wine")
    add_wine.add_argument("name")
    add_wine.add_argument("--rating", type=int, required=True)
    add_wine.add_argument("--region")
    add_wine.add_argument("--grape")
    add_wine.add_argument("--vintage", type=int)
    add_wine.add_argument("--notes")

    add_sake = subparsers.add_parser("add-sake", help="Add a sake")
    add_sake.add_argument("name")
    add_sake.add_argument("--rating", type=int, required=True)
    add_sake.add_argument("--brewery")
    add_sake.add_argument("--type", choices=SakeType.values())
    add_sake.add_argument("--region")
    add_sake.add_argument("--notes")

    remove = subparsers.add_parser("remove", help="Remove a record by id (prefix from `list`)")
    remove.add_argument("kind", choices=["wine", "sake"])
    remove.add_argument("id")
    remove.add_argument("--force", action="store_true", help="Skip confirmation")

    return parser


def main():
    args = build_parser().parse_args()
    setup_logging("WARNING")

    try:
        asyncio.run(run(args))
    except DataValidationError as e:
        console.print(f"[bold red]Invalid input:[/bold red] {e}")
        sys.exit(1)
    except RecordStoreError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
