"""
dbg2mlb - Debug File Converter Command-Line Interface
=====================================================

This module implements the command-line interface that converts a ca65/ld65
debug file into a Mesen label file.

Usage Examples
--------------
Basic conversion (writes cart.mlb):
    $ dbg2mlb cart.dbg

Explicit output file:
    $ dbg2mlb cart.dbg labels/cart.mlb

Headerless ROM, Save RAM cartridge:
    $ dbg2mlb cart.dbg cart.mlb -b 0 -e S

Write to stdout:
    $ dbg2mlb cart.dbg -

Exit Codes
----------
0 - Success
1 - Conversion error (bad debug file, unresolvable symbol, I/O failure)
2 - Invalid arguments or configuration
3 - Internal error
"""

import logging
from pathlib import Path
from typing import Optional

import click

from dbg2mlb import __version__
from dbg2mlb.cli.errors import handle_cli_exception
from dbg2mlb.dbginfo import read_debug_file
from dbg2mlb.mlb import LabelConfig, generate_labels, write_labels

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.argument(
    "output_file",
    required=False,
    type=click.Path(dir_okay=False, allow_dash=True, path_type=Path),
)
@click.option(
    "-b", "--base",
    type=str,
    default="0x10",
    show_default=True,
    envvar="DBG2MLB_BASE",
    help="ROM base offset subtracted from PRG-ROM labels (decimal, 0x or $ hex). "
         "Mesen strips the 16-byte iNES header, hence the default.",
)
@click.option(
    "-e", "--expansion-ram",
    type=str,
    default="W",
    show_default=True,
    envvar="DBG2MLB_EXPANSION_RAM",
    help="How to label $6000-$7FFF: W = Work RAM, S = battery backed Save RAM.",
)
@click.option(
    "--ranges/--no-ranges",
    default=False,
    help="Write multi-byte symbols as address ranges. Default: disabled.",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="dbg2mlb")
def main(
    input_file: Path,
    output_file: Optional[Path],
    base: str,
    expansion_ram: str,
    ranges: bool,
    verbose: bool,
) -> None:
    """
    Convert a ca65/ld65 debug file to a Mesen label file.

    INPUT_FILE is the debug file written by `ld65 --dbgfile`.
    OUTPUT_FILE is the .mlb file to write (default: INPUT_FILE with a .mlb
    suffix, or - for stdout).

    Not every feature of the debug file is supported by Mesen (notably
    anonymous labels), so those are left out of the label file.

    \b
    Examples:
        dbg2mlb cart.dbg                  # Outputs cart.mlb
        dbg2mlb cart.dbg cart.mlb -e S    # $6000-$7FFF is Save RAM
        dbg2mlb cart.dbg out.mlb -b 0     # ROM without iNES header
    """
    setup_logging(verbose)

    try:
        config = LabelConfig.from_strings(base, expansion_ram, emit_ranges=ranges)

        if output_file is None:
            output_file = input_file.with_suffix(".mlb")
        to_stdout = str(output_file) == "-"

        if verbose:
            click.echo(f"Base offset: 0x{config.base_offset:X}", err=True)
            click.echo(f"$6000-$7FFF: {config.expansion_ram.get_description()}", err=True)
            click.echo(f"Reading {input_file}...", err=True)

        store = read_debug_file(input_file)
        result = generate_labels(store, config)

        # Output is only opened once every label has resolved
        if to_stdout:
            for line in result.lines:
                click.echo(line)
        else:
            write_labels(result.lines, output_file)

        if verbose:
            click.echo(result.version, err=True)
            counts = ", ".join(f"{kind}={count}" for kind, count in sorted(store.summary().items()))
            click.echo(f"Records: {counts}", err=True)
            destination = "stdout" if to_stdout else str(output_file)
            click.echo(f"Wrote {result.describe()} to {destination}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
