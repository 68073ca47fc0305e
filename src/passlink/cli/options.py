# src/passlink/cli/options.py
from __future__ import annotations

from dataclasses import replace
from typing import Optional

import click

from passlink.security.passwords import PasswordSettings
from passlink.urlparams import DEFAULTS, decode

# (option suffix, settings field, help noun); --no-X sets the field True
_CLASS_SWITCHES = (
    ("lower", "exclude_lowercase", "lowercase letters"),
    ("upper", "exclude_uppercase", "uppercase letters"),
    ("digits", "exclude_numbers", "digits"),
    ("symbols", "exclude_symbols", "symbols"),
    ("leading-special", "rule_no_leading_special", "a digit/symbol as the first character"),
)


def _param(suffix: str, negative: bool) -> str:
    return ("no_" if negative else "") + suffix.replace("-", "_")


def settings_options(fn):
    """
    Options shared by every command that builds PasswordSettings.
    Switches left unset keep whatever --from-url (or the defaults) gave.
    """
    decorators = [
        click.option("--from-url", "from_url", default=None,
                     help="Start from the settings encoded in a share URL (or bare query string)."),
        click.option("-l", "--length", type=int, default=None,
                     help=f"Password length, 1-128. [default: {DEFAULTS.length}]"),
    ]
    for suffix, _field, noun in _CLASS_SWITCHES:
        decorators.append(click.option(f"--{suffix}", _param(suffix, False), is_flag=True,
                                       help=f"Allow {noun}."))
        decorators.append(click.option(f"--no-{suffix}", _param(suffix, True), is_flag=True,
                                       help=f"Forbid {noun}."))
    decorators.append(click.option("-x", "--exclude", "exclude", default=None,
                                   help="Individual characters that must never appear, e.g. 'O0Il1'."))
    for deco in reversed(decorators):
        fn = deco(fn)
    return fn


def build_settings(*, from_url: Optional[str], length: Optional[int], exclude: Optional[str],
                   **switches: bool) -> PasswordSettings:
    base = decode(from_url) if from_url else DEFAULTS

    overrides = {}
    if length is not None:
        overrides["length"] = length
    if exclude is not None:
        overrides["excluded_chars"] = exclude
    for suffix, field, _noun in _CLASS_SWITCHES:
        allow = switches.get(_param(suffix, False), False)
        forbid = switches.get(_param(suffix, True), False)
        if allow and forbid:
            raise click.UsageError(f"--{suffix} and --no-{suffix} are mutually exclusive.")
        if allow or forbid:
            overrides[field] = forbid
    return replace(base, **overrides)
