from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from bytesize.config_loader import load_config
from bytesize.env_loader import load_env_file
from bytesize.errors import InvalidSize
from bytesize.logging_setup import correlation_context, get_logger, setup_logging
from bytesize.size import Size
from bytesize.units import BYTES_SUFFIX, UNIT_SUFFIXES

LOGGER = get_logger(__name__, "CLI")

_CONVERTERS = {
    "KB": Size.kilobytes,
    "MB": Size.megabytes,
    "GB": Size.gigabytes,
    "TB": Size.terabytes,
    "PB": Size.petabytes,
}


def _parse_or_usage_error(text: str, param_hint: str) -> Size:
    try:
        return Size.parse(text)
    except InvalidSize as exc:
        raise click.BadParameter(str(exc), param_hint=param_hint) from exc


@click.group()
@click.option(
    "--env-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Load KEY=VALUE pairs (e.g. BYTESIZE_LOG_LEVEL) from this file before logging is set up.",
)
def main(env_file: Optional[Path]) -> None:
    """Parse and format byte sizes (1024-based units)."""
    try:
        if env_file is not None:
            load_env_file(env_file)
        setup_logging()
    except InvalidSize as exc:
        raise click.ClickException(str(exc)) from exc
    LOGGER.debug("CLI bootstrap completed env_file=%s", env_file)


@main.command()
@click.argument("text")
def parse(text: str) -> None:
    """Print the byte count of TEXT, e.g. "1.5 GB"."""
    with correlation_context():
        size = _parse_or_usage_error(text, "TEXT")
        LOGGER.debug("CLI parse text=%r bytes=%s", text, size.bytes())
        click.echo(size.bytes())


@main.command(name="format")
@click.argument("num_bytes", metavar="BYTES", type=int)
def format_command(num_bytes: int) -> None:
    """Print BYTES in the largest fitting unit.

    Pass negative values after "--", e.g. `bytesize format -- -2048`.
    """
    with correlation_context():
        click.echo(str(Size(num_bytes)))


@main.command()
@click.argument("text")
@click.option(
    "--unit",
    type=click.Choice(UNIT_SUFFIXES, case_sensitive=False),
    default="MB",
    show_default=True,
)
def convert(text: str, unit: str) -> None:
    """Print the size TEXT expressed in UNIT."""
    with correlation_context():
        size = _parse_or_usage_error(text, "TEXT")
        if unit == BYTES_SUFFIX:
            click.echo(size.bytes())
            return
        click.echo(_CONVERTERS[unit](size))


@main.command(name="check-config")
@click.argument("config_path", type=click.Path(path_type=Path))
def check_config(config_path: Path) -> None:
    """Validate a YAML file of named size limits and print them."""
    with correlation_context():
        try:
            cfg = load_config(config_path)
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc
        for name, size in sorted(cfg.limits.items()):
            click.echo(f"{name}: {size.bytes()} ({size})")


if __name__ == "__main__":
    main()
