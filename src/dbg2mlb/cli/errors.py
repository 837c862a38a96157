"""
CLI Error Handling
==================

Provides consistent error messages and exit codes for the command line.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Standard exit codes for the CLI."""
    SUCCESS = 0
    CONVERSION_ERROR = 1  # Bad debug file, unresolvable symbol, I/O failure
    INVALID_ARGS = 2      # Invalid arguments or configuration
    INTERNAL_ERROR = 3    # Unexpected internal error


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
) -> NoReturn:
    """
    Report an exception and exit with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always
    """
    from dbg2mlb.errors import Dbg2MlbError, InvalidConfigurationError, LocatedError

    if isinstance(error, InvalidConfigurationError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, LocatedError):
        # Already carries an "error:" prefix
        click.echo(str(error), err=True)
        sys.exit(ExitCode.CONVERSION_ERROR)

    elif isinstance(error, Dbg2MlbError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.CONVERSION_ERROR)

    elif isinstance(error, click.BadParameter):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
