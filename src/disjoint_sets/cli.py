"""CLI entry point for disjoint-sets tool."""

import click

from disjoint_sets import __version__
from disjoint_sets.commands import group


@click.group()
@click.version_option(version=__version__, prog_name="disjoint-sets")
@click.pass_context
def main(ctx):
    """Disjoint-Set Grouping Tool.

    Merge keyed items into equivalence classes with per-class values.
    """
    ctx.ensure_object(dict)


# Register commands
main.add_command(group.group)


if __name__ == "__main__":
    main()
