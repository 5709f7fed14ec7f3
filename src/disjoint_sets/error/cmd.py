import functools
from typing import Callable

import click
from rich.console import Console

console = Console()


def handle_command_errors(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (FileNotFoundError, ValueError) as e:
            console.print(f"[red]Error:[/red] {e}", highlight=False)
            raise click.Abort()
        except KeyError as e:
            console.print(f"[red]Error:[/red] {e.args[0] if e.args else e}", highlight=False)
            raise click.Abort()
        except Exception as e:
            console.print(f"[red]Unexpected error:[/red] {e}", highlight=False)
            raise click.Abort()

    return wrapper
