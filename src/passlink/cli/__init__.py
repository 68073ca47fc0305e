# src/passlink/cli/__init__.py
from __future__ import annotations

from typing import Optional

import click

from ..config import AppCfg, load_env
from ..logging import LEVELS, setup_logging
from .pw_gen import pw_gen_cli
from .share import decode_link_cli, share_link_cli


@click.group()
@click.option("--env-file", default=None, type=click.Path(dir_okay=False),
              help="Load environment from this .env instead of ./.env.")
@click.option("--log-level", default=None, type=click.Choice(LEVELS, case_sensitive=False),
              help="Log level. [default: PASSLINK_LOG_LEVEL or INFO]")
@click.option("--log-file", default=None, help="Also log to this file (rotated).")
@click.option("--quiet", is_flag=True, help="Silence console logs.")
@click.pass_context
def cli(ctx: click.Context, env_file: Optional[str], log_level: Optional[str],
        log_file: Optional[str], quiet: bool):
    """passlink: generate passwords and share their settings as links."""
    load_env(env_file)
    cfg = AppCfg.from_env()
    try:
        cfg.validate()
    except RuntimeError as e:
        raise click.ClickException(str(e)) from e

    setup_logging(level=log_level or cfg.log_level, quiet=quiet, log_file=log_file or cfg.log_file)
    ctx.obj = cfg


cli.add_command(pw_gen_cli)
cli.add_command(share_link_cli)
cli.add_command(decode_link_cli)


if __name__ == "__main__":
    cli()
