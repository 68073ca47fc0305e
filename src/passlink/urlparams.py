# src/passlink/urlparams.py
"""
Password settings <-> URL query string.

Only settings that differ from DEFAULTS are written. Flags are written as a
bare key (presence means true), so an omitted flag always reads back as
false. The excluded characters are percent-encoded once before the query
string itself is encoded, and decoded once more after it is parsed.
"""
from __future__ import annotations

import re
from dataclasses import replace
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple, Union
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit, urlunsplit

from passlink.errors import Diagnostic
from passlink.logging import get_logger
from passlink.security.passwords import MAX_LENGTH, MIN_LENGTH, PasswordSettings

log = get_logger()

__all__ = [
    "DEFAULTS",
    "PARAM_KEYS",
    "decode",
    "decode_with_diagnostics",
    "encode",
    "parse_query_string",
    "build_query_string",
    "share_url",
]

Pair = Tuple[str, str]
QueryLike = Union[str, Mapping[str, object], Iterable[Pair]]

DEFAULTS = PasswordSettings()

# Insertion order is the order keys are written in.
PARAM_KEYS: Mapping[str, str] = MappingProxyType({
    "length": "len",
    "exclude_lowercase": "exLower",
    "exclude_uppercase": "exUpper",
    "exclude_numbers": "exNum",
    "exclude_symbols": "exSym",
    "rule_no_leading_special": "ruleNoLead",
    "excluded_chars": "exc",
})

FLAG_FIELDS = (
    "exclude_lowercase",
    "exclude_uppercase",
    "exclude_numbers",
    "exclude_symbols",
    "rule_no_leading_special",
)

# characters encodeURIComponent leaves alone (quote() already keeps _.-~)
_URI_COMPONENT_SAFE = "!*'()"
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
# "scheme://..." or "/path...": only these are split as URLs
_URL_START = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*://|/")


def parse_query_string(query: str) -> list[Pair]:
    """
    Accepts a bare query ("len=24&exLower"), one with a leading "?",
    or a full URL. Keys without "=" come back with an empty value.
    A bare query may contain "?" or ":" inside its values.
    """
    if query.startswith("?"):
        query = query[1:]
    elif _URL_START.match(query):
        query = urlsplit(query).query
    return parse_qsl(query, keep_blank_values=True)


def build_query_string(pairs: Iterable[Pair]) -> str:
    return urlencode(list(pairs))


def _as_pairs(query: QueryLike) -> list[Pair]:
    if isinstance(query, str):
        return parse_query_string(query)
    if isinstance(query, Mapping):
        out = []
        for k, v in query.items():
            # parse_qs() style values
            if isinstance(v, (list, tuple)):
                v = v[0] if v else ""
            out.append((str(k), "" if v is None else str(v)))
        return out
    return [(str(k), str(v)) for k, v in query]


def _percent_decode(value: str) -> str:
    if _BAD_ESCAPE.search(value):
        raise ValueError("malformed percent escape")
    return unquote(value, errors="strict")


def _parse_length(raw: str) -> int:
    m = _LEADING_INT.match(raw)
    if not m:
        raise ValueError("not an integer")
    n = int(m.group(1))
    if n < MIN_LENGTH or n > MAX_LENGTH:
        raise ValueError(f"out of range {MIN_LENGTH}-{MAX_LENGTH}")
    return n


def decode_with_diagnostics(query: QueryLike) -> tuple[PasswordSettings, list[Diagnostic]]:
    """
    Settings from a query, starting from DEFAULTS. Never raises: a field
    that cannot be applied keeps its default and yields a Diagnostic.
    Unknown keys are ignored; for repeated keys the first one wins.
    """
    params: dict[str, str] = {}
    for k, v in _as_pairs(query):
        params.setdefault(k, v)

    values = {}
    diagnostics: list[Diagnostic] = []

    len_key = PARAM_KEYS["length"]
    raw_len = params.get(len_key)
    if raw_len:
        try:
            values["length"] = _parse_length(raw_len)
        except ValueError as e:
            diagnostics.append(Diagnostic(len_key, raw_len, f"length {e}; using {DEFAULTS.length}"))

    for field in FLAG_FIELDS:
        values[field] = PARAM_KEYS[field] in params

    exc_key = PARAM_KEYS["excluded_chars"]
    raw_exc = params.get(exc_key)
    if raw_exc:
        try:
            values["excluded_chars"] = _percent_decode(raw_exc)
        except ValueError as e:
            diagnostics.append(Diagnostic(exc_key, raw_exc, f"cannot decode excluded characters ({e})"))

    return replace(DEFAULTS, **values), diagnostics


def decode(query: QueryLike) -> PasswordSettings:
    settings, diagnostics = decode_with_diagnostics(query)
    for d in diagnostics:
        log.warning(f"Ignoring URL parameter {d}")
    return settings


def encode(settings: PasswordSettings) -> list[Pair]:
    """Ordered (key, value) pairs for every setting that differs from DEFAULTS."""
    pairs: list[Pair] = []
    if settings.length != DEFAULTS.length:
        pairs.append((PARAM_KEYS["length"], str(settings.length)))
    for field in FLAG_FIELDS:
        if getattr(settings, field):
            pairs.append((PARAM_KEYS[field], ""))
    if settings.excluded_chars:
        pairs.append((
            PARAM_KEYS["excluded_chars"],
            quote(settings.excluded_chars, safe=_URI_COMPONENT_SAFE),
        ))
    return pairs


def share_url(base_url: str, settings: PasswordSettings) -> str:
    """
    base_url with its query replaced by the encoded settings. All-default
    settings give the bare path, without a "?".
    """
    parts = urlsplit(base_url)
    path = parts.path or ("/" if parts.netloc else "")
    return urlunsplit((parts.scheme, parts.netloc, path, build_query_string(encode(settings)), ""))
