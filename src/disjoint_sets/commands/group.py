"""Group command for merging keyed items into equivalence classes."""

import logging
from pathlib import Path

import click
import pandas as pd
from rich.console import Console
from rich.table import Table

from disjoint_sets.core.combine import COMBINER_NAMES
from disjoint_sets.core.config import OutputConfig, load_config
from disjoint_sets.core.grouping import ClassGrouper, KeyedClass
from disjoint_sets.error.cmd import handle_command_errors

console = Console()


def _format_members(members: list, output: OutputConfig) -> str:
    shown = [str(m) for m in members[: output.max_members]]
    if len(members) > output.max_members:
        shown.append(f"... (+{len(members) - output.max_members})")
    return ", ".join(shown)


def display_classes_table(classes: list[KeyedClass], output: OutputConfig) -> None:
    """Print classes as a rich table."""
    table = Table(title="Classes")
    table.add_column("Class", style="cyan", justify="right")
    table.add_column("Value", style="green")
    table.add_column("Size", justify="right")
    if output.show_members:
        table.add_column("Members")

    for cls in classes:
        row = [str(cls.class_id), str(cls.value), str(cls.size)]
        if output.show_members:
            row.append(_format_members(cls.members, output))
        table.add_row(*row)

    console.print(table)


def classes_to_dataframe(classes: list[KeyedClass], output: OutputConfig) -> pd.DataFrame:
    """Convert classes to a DataFrame with one row per class."""
    return pd.DataFrame(
        {
            "class_id": [cls.class_id for cls in classes],
            "value": [cls.value for cls in classes],
            "size": [cls.size for cls in classes],
            "members": [
                output.member_separator.join(str(m) for m in cls.members) for cls in classes
            ],
        }
    )


@click.command()
@click.argument("pairs_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--items",
    "-i",
    "items_file",
    type=click.Path(exists=True, dir_okay=False),
    help="CSV of keys and values (default: every key in PAIRS_FILE with value 1)",
)
@click.option(
    "--combine",
    "-c",
    type=click.Choice(COMBINER_NAMES),
    help="Function merging the values of two classes (default: from config, 'sum')",
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Discard all classes if a combine function fails",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON configuration file",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Output CSV file for the classes",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@handle_command_errors
def group(
    pairs_file: str,
    items_file: str | None,
    combine: str | None,
    strict: bool | None,
    config_file: str | None,
    output: str | None,
    verbose: bool,
) -> None:
    """Merge keyed items into equivalence classes.

    PAIRS_FILE: CSV with two key columns; each row merges the classes of its keys
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    config = load_config(Path(config_file) if config_file else None)
    overrides = {}
    if combine is not None:
        overrides["combine"] = combine
    if strict is not None:
        overrides["strict"] = strict
    grouping_config = config.grouping.model_copy(update=overrides)

    console.print(f"[bold blue]Grouping pairs from:[/bold blue] {pairs_file}")

    grouper = ClassGrouper(grouping_config)
    pairs = pd.read_csv(pairs_file)
    if items_file:
        index = grouper.build_index(pd.read_csv(items_file))
    else:
        index = grouper.index_from_pairs(pairs)

    summary = grouper.merge_pairs(index, pairs)
    classes = grouper.collect(index)

    display_classes_table(classes, config.output)
    console.print(
        f"[dim]Slots: {len(index)}, classes: {len(classes)}, "
        f"merged: {summary.merged}, redundant: {summary.redundant}, "
        f"skipped: {summary.skipped}[/dim]"
    )

    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        classes_to_dataframe(classes, config.output).to_csv(output_path, index=False)
        console.print(f"[green]Saved classes to:[/green] {output_path}")

    console.print("[bold green]✓[/bold green] Grouping complete!")
