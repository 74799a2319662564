"""Whitespace collapsing."""

from __future__ import annotations

import functools
import re
from typing import FrozenSet, Tuple

_NO_KEEP: FrozenSet[str] = frozenset()


@functools.lru_cache(maxsize=64)
def _patterns(kept: FrozenSet[str]) -> Tuple["re.Pattern[str]", "re.Pattern[str]", "re.Pattern[str]"]:
    excluded = "".join(re.escape(ch) for ch in sorted(kept) if ch != "\n")
    blank = rf"(?![{excluded}])[^\S\n]" if excluded else r"[^\S\n]"
    if "\n" in kept:
        # never merge or trim a newline that must be kept
        space = f"(?:{blank})"
        around_newline = rf"{space}*\n{space}*"
    else:
        space = rf"(?:{blank}|\n)"
        around_newline = rf"{space}*\n{space}*"
    return (
        re.compile(rf"(?:{blank})+"),
        re.compile(around_newline),
        re.compile(rf"\A{space}+|{space}+\Z"),
    )


def collapse_whitespace(text: str, keep: FrozenSet[str] = _NO_KEEP) -> str:
    """Collapse horizontal whitespace runs to one space and newline runs to one newline.

    Whitespace around a newline is dropped and the text is trimmed. Whitespace
    characters listed in ``keep`` are left exactly where they are.
    """
    blank_run, around_newline, edges = _patterns(frozenset(ch for ch in keep if ch.isspace()))
    text = blank_run.sub(" ", text)
    text = around_newline.sub("\n", text)
    return edges.sub("", text)
