#!/usr/bin/env python3
"""
Recommendation script for the tasting log.

Loads wines and sakes from the CSV store, builds the preference profile, and
prints ranked recommendations with their reasons.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tastelog.config import DATA_DIR
from tastelog.error_handling import RecordStoreError
from tastelog.recommender import RecommendationEngine
from tastelog.schema import RecommendationList
from tastelog.store import CsvRecordStore, RetryingRecordStore
from tastelog.utils import setup_logging

console = Console()


def create_recommendations_table(recommendations):
    """Table of ranked recommendations."""
    table = Table(
        title="🍶 Recommendations",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
        title_style="bold white"
    )

    table.add_column("#", style="dim", width=3)
    table.add_column("Type", width=6)
    table.add_column("Name", style="cyan", width=40)
    table.add_column("Score", justify="right", style="bold white", width=7)
    table.add_column("Reason", style="dim white")

    for rank, rec in enumerate(recommendations, start=1):
        table.add_row(
            str(rank),
            rec.type.value,
            rec.name,
            f"{rec.similarity:.2f}",
            rec.reason
        )

    return table


def create_profile_table(preferences):
    """Table of accumulated preference weights per category and dimension."""
    table = Table(
        title="🎯 Preference Profile",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    table.add_column("Category", width=8)
    table.add_column("Dimension", width=10)
    table.add_column("Value", style="cyan")
    table.add_column("Weight", justify="right")

    wine = preferences.wine
    sake = preferences.sake
    dimensions = [
        ("wine", "region", wine.preferred_regions),
        ("wine", "grape", wine.preferred_grapes),
        ("sake", "brewery", sake.preferred_breweries),
        ("sake", "type", sake.preferred_types),
        ("sake", "region", sake.preferred_regions),
    ]

    for category, dimension, weights in dimensions:
        for value, weight in sorted(weights.items(), key=lambda kv: kv[1], reverse=True):
            table.add_row(category, dimension, value, str(weight))

    table.add_section()
    vintage_range = wine.preferred_vintage_range
    table.add_row(
        "wine", "vintage",
        f"{vintage_range.min}-{vintage_range.max}" if vintage_range else "-",
        ""
    )
    table.add_row("wine", "average", "", f"{wine.average_rating:.2f}")
    table.add_row("sake", "average", "", f"{sake.average_rating:.2f}")

    return table


async def run(data_dir: str, show_profile: bool, as_json: bool) -> int:
    store = RetryingRecordStore(CsvRecordStore(data_dir))
    engine = RecommendationEngine(store)

    recommendations = await engine.generate_recommendations()

    if as_json:
        print(RecommendationList(recommendations=recommendations).model_dump_json(indent=2))
        return 0

    if show_profile:
        preferences = await engine.get_user_preferences()
        console.print(create_profile_table(preferences))
        console.print()

    if not recommendations:
        config = engine.get_recommendation_config()
        console.print(Panel(
            "No recommendations yet.\n"
            f"[dim]Rate at least {config['min_records_for_recommendations']} wines or sakes; "
            f"ratings of {config['high_rating_threshold']}+ shape your profile.[/dim]",
            border_style="yellow"
        ))
        return 0

    console.print(create_recommendations_table(recommendations))
    console.print()
    return 0


def main():
    """Main execution function."""
    parser = argparse.ArgumentParser(description="Show recommendations from your tasting log")
    parser.add_argument("--data-dir", default=DATA_DIR, help="Directory holding wines.csv and sakes.csv")
    parser.add_argument("--profile", action="store_true", help="Also print the preference profile")
    parser.add_argument("--json", action="store_true", help="Print recommendations as JSON")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args()

    setup_logging(args.log_level)

    try:
        exit_code = asyncio.run(run(args.data_dir, args.profile, args.json))
    except RecordStoreError as e:
        console.print(f"[bold red]Store error:[/bold red] {e}")
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
