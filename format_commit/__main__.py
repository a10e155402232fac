#!/usr/bin/env python3
"""Entry point for running format-commit as a module."""

import sys
from typing import NoReturn

import click
from dotenv import load_dotenv

# Load environment variables before any imports
load_dotenv()

from . import __version__
from .cli import console
from .cli.main import FormatCommit


def handle_error(error: BaseException) -> NoReturn:
    """Handle errors in a consistent way."""
    if isinstance(error, (KeyboardInterrupt, EOFError)):
        console.print_error("\nOperation cancelled by user.")
        sys.exit(1)
    else:
        console.print_error(f"An error occurred: {str(error)}")
        sys.exit(1)


@click.command()
@click.option("-b", "--branch", is_flag=True, help="Create a new branch with standardized naming")
@click.option("-c", "--config", "configure", is_flag=True, help="Generate or update the configuration file")
@click.option("-t", "--test", is_flag=True, help="Preview without executing git commands")
@click.option("-d", "--debug", is_flag=True, help="Display additional logs")
@click.version_option(__version__, prog_name="format-commit")
def main(branch: bool, configure: bool, test: bool, debug: bool) -> None:
    """Standardize commit titles and branch names."""
    try:
        app = FormatCommit(test_mode=test)
        app.run(branch=branch, configure=configure, debug=debug)
    except (KeyboardInterrupt, EOFError, Exception) as e:
        handle_error(e)


if __name__ == "__main__":
    main()
