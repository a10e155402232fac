"""Console output formatting and user interaction."""

import logging
from typing import Callable

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.text import Text

console = Console()

Validator = Callable[[str], str | None]


def setup_logging(debug: bool) -> None:
    """Switch the root logger between INFO and DEBUG."""
    logging.getLogger().setLevel(logging.DEBUG if debug else logging.INFO)


def print_success(message: str) -> None:
    """Print success message."""
    console.print(f"\n[bold green]✅ {message}[/bold green]")


def print_error(message: str) -> None:
    """Print error message."""
    console.print(f"\n[bold red]❌ {message}[/bold red]")


def print_info(message: str) -> None:
    """Print info message."""
    console.print(f"\n[bold blue]ℹ️ {message}[/bold blue]")


def print_warning(message: str) -> None:
    """Print warning message."""
    console.print(f"\n[bold yellow]⚠️ {message}[/bold yellow]")


def print_debug(message: str, exc_info: bool = False) -> None:
    """Print debug details, with the current traceback if requested."""
    console.print(f"[dim]{message}[/dim]")
    if exc_info:
        console.print_exception()


def print_title(title: str, label: str = "Commit title") -> None:
    """Print the final title or branch name."""
    console.print(Panel(Text(title), title=label, expand=False, border_style="green"))


def print_output(output: str) -> None:
    """Print raw command output."""
    if output and output.strip():
        console.print(Text(output.rstrip()), style="dim")


def confirm_action(prompt: str, default: bool = False) -> bool:
    """Ask user to confirm an action."""
    return Confirm.ask(f"\n{prompt}", default=default)


def select_choice(message: str, choices: list[tuple[str, str]], default: str | None = None) -> str:
    """Show a numbered list of ``(value, label)`` pairs and return the chosen value."""
    console.print(f"\n[bold blue]{message}[/bold blue]")
    for i, (value, label) in enumerate(choices, 1):
        suffix = f" [dim]- {label}[/dim]" if label and label != value else ""
        console.print(f"  [cyan]{i}.[/cyan] {value}{suffix}")

    numbers = [str(i) for i in range(1, len(choices) + 1)]
    default_number = "1"
    if default is not None:
        default_number = next((n for n, (v, _) in zip(numbers, choices) if v == default), "1")
    answer = Prompt.ask("Choose", choices=numbers, default=default_number, show_choices=False)
    return choices[int(answer) - 1][0]


def ask_text(message: str, validate: Validator | None = None, default: str | None = None) -> str:
    """Ask for text until the validator accepts it."""
    while True:
        if default is not None:
            answer = Prompt.ask(message, default=default)
        else:
            answer = Prompt.ask(message)
        answer = (answer or "").strip()
        error = validate(answer) if validate else None
        if error is None:
            return answer
        print_error(error)


def ask_int(message: str, validate: Callable[[int], str | None] | None = None, default: int | None = None) -> int:
    """Ask for an integer until the validator accepts it."""
    while True:
        if default is not None:
            answer = IntPrompt.ask(message, default=default)
        else:
            answer = IntPrompt.ask(message)
        error = validate(answer) if validate else None
        if error is None:
            return answer
        print_error(error)


def ask_secret(message: str) -> str:
    """Ask for a value without echoing it."""
    return Prompt.ask(message, password=True).strip()
