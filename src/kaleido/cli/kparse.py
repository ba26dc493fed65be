"""
kparse - Kaleido Parser Command-Line Interface
==============================================

This module implements the command-line front end for the Kaleido
parser. It reads source from a file or standard input, parses every
top-level construct, and reports each one as it is recognised.

Usage Examples
--------------
Interactive session (prompt shown when stdin is a terminal):
    $ kparse
    ready> def f(x) x*2;
    Parsed a function definition.

Parse a file:
    $ kparse program.k

Dump the AST of every construct:
    $ kparse --ast program.k

Verbose logging:
    $ kparse -v program.k
"""

import dataclasses
import logging
import sys
from typing import Optional, TextIO

import click

from kaleido import __version__
from kaleido.ast import ASTPrinter
from kaleido.cli.errors import handle_cli_exception
from kaleido.config import FrontendConfig
from kaleido.driver import Driver


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.File("r"),
    default="-",
    required=False,
)
@click.option(
    "--ast", "show_ast",
    is_flag=True,
    help="Print the AST of each parsed construct to stdout",
)
@click.option(
    "--prompt/--no-prompt",
    default=None,
    help="Show the interactive prompt (default: only when input is a terminal)",
)
@click.option(
    "--anon-name",
    default=None,
    help="Name of the function wrapping top-level expressions (default: __anon_expr)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(version=__version__, prog_name="kparse")
def main(
    input_file: TextIO,
    show_ast: bool,
    prompt: Optional[bool],
    anon_name: Optional[str],
    verbose: bool,
) -> None:
    """
    Parse Kaleido source code.

    INPUT_FILE is the source file to parse (default: standard input).

    Each top-level definition, extern and expression is reported on
    stderr as it is parsed. After a syntax error the offending token is
    skipped and parsing resumes. If any errors were found, the run ends
    with an error count and exit status 1.

    \b
    Examples:
        kparse                       # Interactive session
        kparse program.k             # Parse a file
        kparse --ast program.k       # Dump the AST
        echo "1+2*3" | kparse --ast  # Parse standard input
    """
    try:
        config = FrontendConfig.from_env()
        if anon_name is not None:
            config = dataclasses.replace(config, anonymous_name=anon_name)

        logging.basicConfig(
            level=logging.DEBUG if verbose else config.logging_level,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

        interactive = prompt if prompt is not None else input_file.isatty()

        driver = Driver(
            input_file,
            filename=input_file.name,
            config=config,
            emit=lambda message: click.echo(message, err=True),
            interactive=interactive,
            prompt=lambda text: click.echo(text, nl=False, err=True),
        )
        result = driver.run()

        if show_ast:
            printer = ASTPrinter()
            for item in result.items:
                click.echo(printer.print(item.node))

        if verbose:
            click.echo(f"Parsed {len(result.items)} constructs", err=True)

        driver.errors.raise_if_errors()

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
