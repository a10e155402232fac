"""Casing rules for pattern keywords."""

from enum import Enum


class Casing(Enum):
    """How a keyword value is cased when rendered."""

    LOWER = "lower"
    UPPER = "upper"
    CAPITALIZE = "capitalize"
    AS_PROVIDED = "asProvided"


def detect_casing(word: str) -> Casing:
    """Infer the casing of a keyword from the way it is spelled in a pattern.

    ``type`` is lowercase, ``TYPE`` is uppercase and anything else (``Type``,
    ``tYpE``) is treated as capitalized. ``AS_PROVIDED`` is never detected.
    """
    if word == word.lower():
        return Casing.LOWER
    if word == word.upper():
        return Casing.UPPER
    return Casing.CAPITALIZE


def apply_casing(value: str, casing: Casing) -> str:
    """Apply a casing to the whole value (multi-word values are not title-cased)."""
    if not value:
        return value
    if casing == Casing.LOWER:
        return value.lower()
    if casing == Casing.UPPER:
        return value.upper()
    if casing == Casing.CAPITALIZE:
        return value[0].upper() + value[1:].lower()
    return value
