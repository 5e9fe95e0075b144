"""
Entry point:  roster [--env-file PATH] [--log-level LEVEL]
          or  python -m roster_shell

Exit 0 on quit / end of input, 2 when the roster reports corruption.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import click

from roster_kernel import RosterCorruptionError, RosterStore

from .config import ConfigError, ShellConfig, load_config
from .shell import TextShell

logger = logging.getLogger("roster_shell")

EXIT_CORRUPTION = 2


@click.command("roster")
@click.option("--env-file", type=click.Path(dir_okay=False), default=None,
              help="Load settings from this .env file.")
@click.option("--log-level", default=None,
              help="Override ROSTER_LOG_LEVEL (DEBUG, INFO, WARNING, ...).")
def main(env_file: Optional[str], log_level: Optional[str]) -> None:
    """Interactive department and personnel roster."""
    try:
        config = load_config(env_file)
        if log_level is not None:
            config = ShellConfig(**{**config.model_dump(), "log_level": log_level})
    except (ConfigError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.debug("starting shell with %r", config)

    shell = TextShell(RosterStore(check_invariants=config.strict_invariants), config=config)
    try:
        code = shell.run()
    except RosterCorruptionError as exc:
        logger.error("roster corrupted, aborting: %s", exc)
        click.echo(f"Fatal: {exc}", err=True)
        sys.exit(EXIT_CORRUPTION)
    sys.exit(code)


if __name__ == "__main__":
    main()
