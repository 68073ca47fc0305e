# src/passlink/security/passwords.py

from __future__ import annotations
import secrets
import string
from dataclasses import dataclass
from typing import Sequence, TypeVar

from passlink.errors import (
    CannotSatisfyLeadingRuleError,
    InvalidLengthError,
    LengthTooShortError,
    NoCharactersAvailableError,
    PasswordGenerationError,
)
from passlink.logging import get_logger

log = get_logger()

T = TypeVar("T")

MIN_LENGTH = 1
MAX_LENGTH = 128
DEFAULT_LENGTH = 20

LOWERCASE = string.ascii_lowercase
UPPERCASE = string.ascii_uppercase
DIGITS = string.digits
SYMBOLS = "!@#$%^&*()_+~`|}{[]:;?><,./-=\\"

# canonical order: required characters are seeded in this order
CLASS_NAMES = ("lowercase", "uppercase", "digits", "symbols")
LETTER_CLASSES = ("lowercase", "uppercase")


@dataclass(frozen=True)
class PasswordSettings:
    length: int = DEFAULT_LENGTH
    exclude_lowercase: bool = False
    exclude_uppercase: bool = False
    exclude_numbers: bool = False
    exclude_symbols: bool = False
    excluded_chars: str = ""
    rule_no_leading_special: bool = False

    def excludes(self, class_name: str) -> bool:
        return {
            "lowercase": self.exclude_lowercase,
            "uppercase": self.exclude_uppercase,
            "digits": self.exclude_numbers,
            "symbols": self.exclude_symbols,
        }[class_name]


@dataclass(frozen=True)
class CharacterPools:
    lowercase: str
    uppercase: str
    digits: str
    symbols: str

    def get(self, class_name: str) -> str:
        return getattr(self, class_name)


def character_pools(excluded_chars: str = "") -> CharacterPools:
    """
    The four class pools with every character of `excluded_chars` removed.
    Duplicates in `excluded_chars` are harmless.
    """
    excluded = set(excluded_chars)

    def _filter(pool: str) -> str:
        return "".join(ch for ch in pool if ch not in excluded)

    return CharacterPools(
        lowercase=_filter(LOWERCASE),
        uppercase=_filter(UPPERCASE),
        digits=_filter(DIGITS),
        symbols=_filter(SYMBOLS),
    )


def active_pools(settings: PasswordSettings) -> dict[str, str]:
    """
    Classes that are not excluded by flag and still have characters left,
    in canonical order.
    """
    pools = character_pools(settings.excluded_chars)
    out: dict[str, str] = {}
    for name in CLASS_NAMES:
        pool = pools.get(name)
        if not settings.excludes(name) and pool:
            out[name] = pool
    return out


def random_index(n: int) -> int:
    """Uniform integer in [0, n) from the OS CSPRNG."""
    if n <= 0:
        raise ValueError("random_index() needs a positive range.")
    return secrets.randbelow(n)


def random_char(pool: str) -> str:
    return pool[random_index(len(pool))]


def secure_shuffle(items: Sequence[T]) -> list[T]:
    """
    Fisher-Yates over a copy of `items`; every permutation is equally likely.
    The input is left untouched.
    """
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = random_index(i + 1)
        out[i], out[j] = out[j], out[i]
    return out


def _validate_length(length) -> None:
    # bool is an int subclass, but True is not a length
    if isinstance(length, bool) or not isinstance(length, int):
        raise InvalidLengthError(f"Invalid length: {length!r} is not an integer.")
    if length < MIN_LENGTH or length > MAX_LENGTH:
        raise InvalidLengthError(
            f"Invalid length: {length} (must be {MIN_LENGTH}-{MAX_LENGTH})."
        )


def _enforce_no_leading_special(buf: list[str], letters: str) -> list[str]:
    if buf[0] in letters:
        return buf
    for i in range(1, len(buf)):
        if buf[i] in letters:
            out = list(buf)
            out[0], out[i] = out[i], out[0]
            return out
    # only reachable when no letter class is active
    raise CannotSatisfyLeadingRuleError()


def generate_password(settings: PasswordSettings | None = None) -> str:
    """
    Random password of exactly settings.length characters with at least one
    character from every active class and none from excluded_chars.

    Raises a PasswordGenerationError subclass when the settings cannot be met.
    """
    settings = settings or PasswordSettings()
    _validate_length(settings.length)

    pools = active_pools(settings)
    if not pools:
        raise NoCharactersAvailableError()

    # Ensure at least one char from each active class
    required = [random_char(p) for p in pools.values()]
    if len(required) > settings.length:
        raise LengthTooShortError(
            f"Length too short to include all {len(required)} required "
            f"character types (length {settings.length})."
        )

    # Fill remainder from combined pool
    char_pool = "".join(pools.values())
    buf = required + [random_char(char_pool) for _ in range(settings.length - len(required))]

    buf = secure_shuffle(buf)

    if settings.rule_no_leading_special:
        letters = "".join(pools.get(name, "") for name in LETTER_CLASSES)
        buf = _enforce_no_leading_special(buf, letters)

    return "".join(buf)


def generate_passwords(settings: PasswordSettings | None, count: int) -> list[str]:
    """`count` independent passwords for the same settings."""
    if count <= 0:
        raise ValueError("count must be > 0.")
    settings = settings or PasswordSettings()
    try:
        out = [generate_password(settings) for _ in range(count)]
    except PasswordGenerationError as e:
        log.debug(f"Generation failed ({e.code}): {e}")
        raise
    log.debug(f"Generated {count} password(s) of length {settings.length}")
    return out
