"""
Per-code-point predicates.

Every function takes a single Unicode scalar value as an int and keeps no
state between calls, so they are safe to use from any thread.
"""

from __future__ import annotations

import unicodedata

from .profile import PrivateUseScope
from .rules import (
    ASCII_CONTROL_MAX,
    BIDI_CONTROLS,
    DEL,
    INVISIBLES,
    NONCHARACTER_FIRST,
    NONCHARACTER_LAST,
    PRIVATE_USE_BMP,
    PRIVATE_USE_SUPPLEMENTARY,
    SURROGATE_FIRST,
    SURROGATE_LAST,
    TAG_FIRST,
    TAG_LAST,
    VARIATION_SELECTOR_RANGES,
    VS15,
    VS16,
)


def _category(cp: int) -> str:
    return unicodedata.category(chr(cp))


def is_tag_character(cp: int) -> bool:
    return TAG_FIRST <= cp <= TAG_LAST


def is_variation_selector(cp: int, keep_emoji: bool = False, keep_all: bool = False) -> bool:
    """True if ``cp`` is a variation selector that should be removed.

    ``keep_all`` exempts every selector; ``keep_emoji`` exempts VS15/VS16
    (text and emoji presentation).
    """
    if keep_all:
        return False
    if keep_emoji and cp in (VS15, VS16):
        return False
    return any(first <= cp <= last for first, last in VARIATION_SELECTOR_RANGES)


def is_noncharacter(cp: int) -> bool:
    if NONCHARACTER_FIRST <= cp <= NONCHARACTER_LAST:
        return True
    # last two code points of every plane
    return (cp & 0xFFFF) in (0xFFFE, 0xFFFF)


def is_private_use(cp: int, scope: PrivateUseScope) -> bool:
    if scope == PrivateUseScope.NONE:
        return False
    first, last = PRIVATE_USE_BMP
    if first <= cp <= last:
        return True
    if scope == PrivateUseScope.ALL:
        return any(first <= cp <= last for first, last in PRIVATE_USE_SUPPLEMENTARY)
    return False


def is_invisible(cp: int) -> bool:
    return cp in INVISIBLES


def is_bidi_control(cp: int) -> bool:
    return cp in BIDI_CONTROLS


def is_control(cp: int) -> bool:
    # direct range test first, the category table covers C1 controls
    if cp <= ASCII_CONTROL_MAX or cp == DEL:
        return True
    return _category(cp) == "Cc"


def is_format_control(cp: int) -> bool:
    return _category(cp) == "Cf"


def is_surrogate(cp: int) -> bool:
    return SURROGATE_FIRST <= cp <= SURROGATE_LAST


def is_combining_mark(cp: int) -> bool:
    return _category(cp).startswith("M")


def is_base_character(cp: int) -> bool:
    """Letters and numbers, the only code points a combining mark may follow."""
    return _category(cp)[0] in ("L", "N")
