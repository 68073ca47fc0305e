# src/passlink/errors.py
from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "PasswordGenerationError",
    "InvalidLengthError",
    "NoCharactersAvailableError",
    "LengthTooShortError",
    "CannotSatisfyLeadingRuleError",
    "Diagnostic",
]


class PasswordGenerationError(ValueError):
    """
    Base for every way a single generation attempt can fail.
    `code` is stable so callers can map it to their own messages.
    """
    code = "generation_failed"
    default_message = "Password generation failed."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class InvalidLengthError(PasswordGenerationError):
    code = "invalid_length"
    default_message = "Invalid length."


class NoCharactersAvailableError(PasswordGenerationError):
    code = "no_characters_available"
    default_message = "All character types excluded or all characters excluded."


class LengthTooShortError(PasswordGenerationError):
    code = "length_too_short"
    default_message = "Length too short to include all required character types."


class CannotSatisfyLeadingRuleError(PasswordGenerationError):
    code = "cannot_satisfy_leading_rule"
    default_message = "Cannot satisfy 'no leading special' rule with selected characters."


@dataclass(frozen=True)
class Diagnostic:
    """A URL field that could not be applied; the setting kept its default."""
    key: str
    value: str
    message: str

    def __str__(self) -> str:
        return f"{self.key}={self.value!r}: {self.message}"
