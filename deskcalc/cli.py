"""CLI interface for deskcalc.

Commands:
- press: Run a key sequence and show the result
- repl: Interactive calculator session
- history: Show calculation history
- clear-history: Clear calculation history
"""

import re
import sys
from typing import Iterable, List

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .calculator import Calculator, get_calculator
from .collaborators import ConsoleRenderer
from .config import load_config, resolve_config_dir
from .log import setup_logging


console = Console()

_NUMBER_TOKEN = re.compile(r"^[0-9.]+$")


def _expand_keys(calculator: Calculator, tokens: Iterable[str]) -> List[str]:
    """Split tokens into keys; "12.5" becomes "1", "2", ".", "5"."""
    keys = []
    for token in tokens:
        if calculator.is_known_key(token):
            keys.append(token)
        elif _NUMBER_TOKEN.match(token):
            keys.extend(token)
        else:
            keys.append(token)
    return keys


def _run_keys(calculator: Calculator, tokens: Iterable[str]) -> List[str]:
    """Press every key; returns the keys that were not recognized."""
    unknown = []
    for key in _expand_keys(calculator, tokens):
        if not calculator.press(key):
            unknown.append(key)
    return unknown


@click.group()
@click.version_option(version=__version__, prog_name="deskcalc")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Config and history directory (default: $DESKCALC_HOME or ~/.deskcalc)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def main(ctx, config_dir: str, verbose: bool):
    """deskcalc - a desk calculator with memory and history.

    Keys: digits, + - * /, ".", "=", "%", C, CE, MC, MR, M+, M-
    """
    ctx.ensure_object(dict)
    config_path = resolve_config_dir(config_dir)
    config = load_config(config_path)
    try:
        setup_logging("DEBUG" if verbose else config.log_level)
    except ValueError as e:
        console.print(f"[red]Error: invalid log level: {e}[/red]")
        sys.exit(1)
    ctx.obj["config_dir"] = str(config_path)


@main.command()
@click.argument("keys", nargs=-1, required=True)
@click.option("--recall", "-r", type=int, help="Start from history entry N (1 = most recent)")
@click.pass_context
def press(ctx, keys: tuple, recall: int):
    """Press a sequence of keys and show the display.

    Examples:
        deskcalc press 7 + 3 =
        deskcalc press 2 + 3 "*" 4 =
        deskcalc press --recall 1 / 2 =
    """
    renderer = ConsoleRenderer(console)
    calculator = get_calculator(ctx.obj["config_dir"], renderer=renderer)

    if recall is not None and not calculator.load_from_history(recall - 1):
        console.print(f"[red]Error: No history entry {recall}[/red]")
        sys.exit(1)

    unknown = _run_keys(calculator, keys)
    if unknown:
        console.print(f"[red]Error: Unknown key(s): {' '.join(unknown)}[/red]")
        sys.exit(1)

    renderer.show()


@main.command()
@click.pass_context
def repl(ctx):
    """Interactive calculator session.

    Enter keys separated by spaces; "quit" or "exit" leaves.
    """
    renderer = ConsoleRenderer(console)
    calculator = get_calculator(ctx.obj["config_dir"], renderer=renderer)
    renderer.show()

    while True:
        try:
            line = click.prompt("calc", default="", show_default=False, prompt_suffix="> ")
        except click.Abort:
            break

        tokens = line.split()
        if tokens and tokens[0].lower() in ("quit", "exit"):
            break

        unknown = _run_keys(calculator, tokens)
        if unknown:
            console.print(f"[yellow]Ignored unknown key(s): {' '.join(unknown)}[/yellow]")
        renderer.show()


@main.command()
@click.option("--count", "-n", default=10, help="Number of entries to show")
@click.pass_context
def history(ctx, count: int):
    """Show calculation history, most recent first."""
    calculator = get_calculator(ctx.obj["config_dir"])
    entries = calculator.history.recent(count)
    if not entries:
        console.print("[yellow]No calculations in history.[/yellow]")
        return

    table = Table(title=f"Last {len(entries)} calculations")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Calculation")
    table.add_column("Result", justify="right", style="bold")
    table.add_column("When", style="dim")

    for i, entry in enumerate(entries, 1):
        table.add_row(
            str(i),
            entry.left_side,
            entry.expression.split(" = ")[-1],
            entry.timestamp.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@main.command("clear-history")
@click.pass_context
def clear_history(ctx):
    """Clear calculation history."""
    calculator = get_calculator(ctx.obj["config_dir"])
    calculator.clear_history()
    console.print("[green]History cleared.[/green]")


if __name__ == "__main__":
    main()
