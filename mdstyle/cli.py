"""
Checks Markdown files against the mdstyle rule catalog.
Prints one line per violation and exits with status 1 when any rule fires.
"""

from __future__ import annotations

from pathlib import Path

import click
from .config import (
    ConfigError,
    apply_overrides,
    build_config,
    validate_config,
    with_rule_options,
)
from .exceptions import LintError
from .filesystem import get_max_file_size
from .linter import format_results, lint_file
from .rules import RULES

__all__ = ["cli"]


def _print_rules(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    for rule in RULES:
        click.echo(f"{rule.code} {rule.alias}: {rule.description} [{', '.join(rule.tags)}]")
    ctx.exit()


@click.command()
@click.version_option(package_name="mdstyle")
@click.option(
    "--list-rules",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_print_rules,
    help="List available rules and exit.",
)
@click.option("--enable", "-e", multiple=True, help="Run only these rules (code or alias).")
@click.option("--disable", "-d", multiple=True, help="Skip these rules (code or alias).")
@click.option("--line-length", type=int, help="Maximum line length for MD013")
@click.argument(
    "filepaths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False)
)
def cli(
    filepaths: tuple[str, ...],
    enable: tuple[str, ...] = (),
    disable: tuple[str, ...] = (),
    line_length: int | None = None,
):
    """
    Entry point for linting Markdown files.

    Args:
        filepaths: Paths to the Markdown files to check.
        enable: Rules to run; every rule runs when empty.
        disable: Rules to skip.
        line_length: Override for the `line_length` option of MD013.

    Returns:
        None.

    Raises:
        click.BadParameter: If configuration values or rule names are invalid.
        click.ClickException: If a file cannot be read or exceeds size limits.

    Examples:
        mdstyle README.md docs/guide.md --disable MD013
    """
    search_path = Path(filepaths[0]).resolve().parent
    try:
        config = build_config(search_path, enable=enable)
        config = apply_overrides(config, disable=(*config.disable, *disable))
        config = with_rule_options(config, "MD013", line_length=line_length)
        validate_config(config)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    found_violations = False
    for filepath in filepaths:
        try:
            results = lint_file(Path(filepath), config, max_file_size)
        except LintError as error:
            raise click.ClickException(str(error)) from error

        for line in format_results(filepath, results):
            click.echo(line)
            found_violations = True

    if found_violations:
        click.get_current_context().exit(1)


if __name__ == "__main__":
    cli()
