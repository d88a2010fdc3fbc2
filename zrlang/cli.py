"""
Command-line interface for the ZR# interpreter.

    zr run FILE [--log-level L] [--strict] [--max-modules N]
    zr tokens FILE
    zr ast FILE

Exit status: 0 on success, 1 on a fatal error (or on runtime errors under
--strict), 2 on usage errors.

Author: xwest
"""

import sys

import click

from . import __version__
from .config import DEFAULT_CONFIG
from .diagnostics import FatalError
from .lexer.lexer import tokenize_file
from .log import LEVELS, configure_logging
from .parser.ast_nodes import dump_tree, release_tree
from .parser.parser import parse_file
from .session import Session


def log_level_option(func):
    return click.option(
        "--log-level",
        type=click.Choice(list(LEVELS), case_sensitive=False),
        default="error",
        envvar="ZR_LOG_LEVEL",
        show_default=True,
        help="Diagnostic log verbosity (written to stderr)",
    )(func)


def _fail(error: Exception):
    click.echo(str(error).rstrip("\n"), err=True)
    sys.exit(1)


@click.group("zr")
@click.version_option(__version__, prog_name="zr")
def main() -> None:
    """ZR# interpreter."""
    pass


@main.command("run")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@log_level_option
@click.option("--strict", is_flag=True, help="Exit with status 1 if any runtime error was reported")
@click.option("--max-modules", type=click.IntRange(min=1), default=None,
              help=f"Module registry capacity [default: {DEFAULT_CONFIG.max_modules}]")
def run_cmd(file: str, log_level: str, strict: bool, max_modules) -> None:
    """Run a ZR# program.

    FILE is the program to run; its directory is the root for `files/` lookups.
    """
    configure_logging(log_level)
    config = DEFAULT_CONFIG.with_overrides(strict=strict, max_modules=max_modules)

    with Session(config) as session:
        try:
            result = session.run_file(file)
        except FatalError as e:
            _fail(e)

    if config.strict and not result.ok:
        click.echo(f"{len(result.errors)} runtime error(s) reported", err=True)
        sys.exit(1)


@main.command("tokens")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@log_level_option
def tokens_cmd(file: str, log_level: str) -> None:
    """Print the token stream of FILE, one token per line."""
    configure_logging(log_level)
    try:
        tokens = tokenize_file(file)
    except (FatalError, OSError) as e:
        _fail(e)

    for token in tokens:
        click.echo(f"{token.location.line}:{token.location.column}\t{token.type.name}\t{token.lexeme!r}")


@main.command("ast")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@log_level_option
def ast_cmd(file: str, log_level: str) -> None:
    """Print the parsed tree of FILE. `loadin` targets are not followed."""
    configure_logging(log_level)
    try:
        program = parse_file(file)
    except (FatalError, OSError) as e:
        _fail(e)

    click.echo(dump_tree(program))
    release_tree(program)


if __name__ == "__main__":
    main()
