from __future__ import annotations

from dataclasses import fields
from typing import Optional

import click

from passlink.config import AppCfg
from passlink.errors import InvalidLengthError
from passlink.security.passwords import MAX_LENGTH, MIN_LENGTH
from passlink.urlparams import decode_with_diagnostics, share_url

from .options import build_settings, settings_options


@click.command("share-link")
@settings_options
@click.option("--base-url", default=None, help="Page the link points at. [default: PASSLINK_BASE_URL]")
@click.pass_obj
def share_link_cli(
    cfg: AppCfg,
    base_url: Optional[str],
    **settings_kw,
) -> None:
    """Print the URL that reproduces these settings."""
    cfg = cfg or AppCfg.from_env()
    settings = build_settings(**settings_kw)
    # an out-of-range length would not survive the trip back
    if not MIN_LENGTH <= settings.length <= MAX_LENGTH:
        raise click.ClickException(str(InvalidLengthError(
            f"Invalid length: {settings.length} (must be {MIN_LENGTH}-{MAX_LENGTH})."
        )))
    click.echo(share_url(base_url or cfg.base_url, settings))


@click.command("decode-link")
@click.argument("url")
def decode_link_cli(url: str) -> None:
    """Show the settings a share URL (or query string) carries."""
    settings, diagnostics = decode_with_diagnostics(url)
    for f in fields(settings):
        click.echo(f"{f.name}: {getattr(settings, f.name)!r}")
    for d in diagnostics:
        click.echo(f"Warning: {d}", err=True)
