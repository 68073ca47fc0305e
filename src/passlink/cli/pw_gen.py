from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import click
from tqdm import tqdm

from passlink.config import AppCfg
from passlink.errors import PasswordGenerationError
from passlink.excel import write_csv, write_txt, write_workbook
from passlink.logging import get_logger
from passlink.security.passwords import PasswordSettings, generate_password, generate_passwords
from passlink.urlparams import share_url

from .options import build_settings, settings_options

log = get_logger()


def _infer_out_kind(out_path: Optional[Path], out_kind: str) -> str:
    if out_kind != "auto":
        return out_kind
    if not out_path:
        return "screen"
    ext = out_path.suffix.lower()
    if ext in (".csv",):
        return "csv"
    if ext in (".xlsx", ".xlsm"):
        return "xlsx"
    # .txt and anything unknown
    return "txt"


def _render_table(passwords: List[str]) -> str:
    idx_w = max(len(str(len(passwords))), 1)
    pw_w = max(max((len(p) for p in passwords), default=8), len("password"))
    sep = f"+-{'-'*idx_w}-+-{'-'*pw_w}-+"
    out = [sep, f"| {'#'.rjust(idx_w)} | {'password'.ljust(pw_w)} |", sep]
    for i, pw in enumerate(passwords, start=1):
        out.append(f"| {str(i).rjust(idx_w)} | {pw.ljust(pw_w)} |")
    out.append(sep)
    return "\n".join(out)


def _generate(settings: PasswordSettings, count: int, progress: bool) -> List[str]:
    try:
        if not progress:
            return generate_passwords(settings, count)
        return [
            generate_password(settings)
            for _ in tqdm(range(count), desc="Generating", unit="pw", dynamic_ncols=True)
        ]
    except PasswordGenerationError as e:
        log.debug(f"pw-gen failed: {e.code}")
        raise click.ClickException(str(e)) from e


@click.command("pw-gen")
@settings_options
@click.option(
    "-n",
    "--count",
    "--amount",
    type=int,
    default=1,
    show_default=True,
    help="How many passwords to generate.",
)
@click.option(
    "-o",
    "--output",
    "out_path",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write generated passwords to a file. If omitted, prints to screen.",
)
@click.option(
    "--out-kind",
    type=click.Choice(["auto", "screen", "txt", "csv", "xlsx"], case_sensitive=False),
    default="auto",
    show_default=True,
    help="Output format. 'auto' infers from --output extension.",
)
@click.option("--progress", type=click.Choice(["auto", "on", "off"], case_sensitive=False), default="auto",
              show_default=True, help="Progress bar while generating. 'auto': on when writing several passwords to a file.")
@click.option("--share", is_flag=True, help="Also print the share URL for these settings.")
@click.pass_obj
def pw_gen_cli(
    cfg: AppCfg,
    count: int,
    out_path: Optional[Path],
    out_kind: str,
    progress: str,
    share: bool,
    **settings_kw,
) -> None:
    """
    Generate passwords. Settings come from --from-url and/or the options above.
    """
    cfg = cfg or AppCfg.from_env()
    if count <= 0:
        raise click.ClickException("--count/--amount must be > 0.")

    settings = build_settings(**settings_kw)
    link = share_url(cfg.base_url, settings)

    kind = _infer_out_kind(out_path, out_kind.lower())
    if progress.lower() == "auto":
        show_progress = kind != "screen" and count > 1
    else:
        show_progress = progress.lower() == "on"

    passwords = _generate(settings, count, show_progress)
    log.info(f"Generated {len(passwords)} password(s) for {link}")

    if kind == "screen" or out_path is None:
        if len(passwords) == 1:
            click.echo(passwords[0])
        else:
            click.echo(_render_table(passwords))
    else:
        if kind == "txt":
            write_txt(out_path, passwords)
        elif kind == "csv":
            write_csv(out_path, passwords, header="password")
        elif kind == "xlsx":
            write_workbook(out_path, passwords, share_url=link)
        else:
            raise click.ClickException(f"Unsupported out kind: {kind}")
        click.echo(f"Wrote {len(passwords)} passwords -> {out_path}")

    if share:
        click.echo(f"Share: {link}")
