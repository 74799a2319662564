"""
Markup stripping.

Runs before any code point filtering so that invisible characters hidden in
tag names or attribute values are removed together with the tag.

Malformed input never raises:
- an unterminated tag (``<b`` with no ``>``) stays as literal text
- an unterminated ``<script>``/``<style>`` loses only its opening tag
- an unterminated code fence stays as literal text
- ``a < b`` is not a tag; a tag starts with ``<`` and a letter, ``/``, ``!`` or ``?``

Code points in ``keep`` survive even when the construct around them is removed.
"""

from __future__ import annotations

import html
import re
from typing import FrozenSet

from .profile import MarkupPolicy

_SCRIPT_STYLE_RE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_TAG_RE = re.compile(r"</?[A-Za-z!?][^<>]*>")

_FENCE_RE = re.compile(r"^[ \t]*```[^\n]*\n.*?^[ \t]*```[ \t]*$", re.MULTILINE | re.DOTALL)

_CODE_SPAN_RE = re.compile(r"(?<!`)(`+)(?!`)[^\n]+?(?<!`)\1(?!`)")
_IMAGE_RE = re.compile(r"!\[[^\]\n]*\]\([^)\n]*\)")
_LINK_RE = re.compile(r"\[([^\]\n]*)\]\([^)\n]*\)")
_BLOCKQUOTE_RE = re.compile(r"^(?:[ \t]*>)+[ \t]?", re.MULTILINE)
_EMPHASIS_RE = re.compile(r"\*+|~~+|(?<!\w)_+|_+(?!\w)")

_NO_KEEP: FrozenSet[str] = frozenset()


def _kept(fragment: str, keep: FrozenSet[str]) -> str:
    return "".join(ch for ch in fragment if ch in keep)


def _remover(keep: FrozenSet[str], replacement: str):
    def replace(match: re.Match) -> str:
        return _kept(match.group(0), keep) or replacement

    return replace


def strip_html(text: str, keep: FrozenSet[str] = _NO_KEEP) -> str:
    """Remove script/style elements, comments and tags, then decode entities."""
    remove = _remover(keep, " ")
    text = _SCRIPT_STYLE_RE.sub(remove, text)
    text = _COMMENT_RE.sub(remove, text)
    text = _TAG_RE.sub(remove, text)
    return html.unescape(text)


def strip_code_fences(text: str, keep: FrozenSet[str] = _NO_KEEP) -> str:
    """Replace each fenced code block, fences included, with a single space."""
    return _FENCE_RE.sub(_remover(keep, " "), text)


def strip_inline_markdown(text: str, keep: FrozenSet[str] = _NO_KEEP) -> str:
    """Remove code spans, images, emphasis and blockquote markers; unwrap links."""

    def link_text(match: re.Match) -> str:
        tail = match.string[match.end(1) : match.end()]
        return _kept("[", keep) + match.group(1) + _kept(tail, keep)

    text = _CODE_SPAN_RE.sub(_remover(keep, " "), text)
    text = _IMAGE_RE.sub(_remover(keep, " "), text)
    text = _LINK_RE.sub(link_text, text)
    text = _BLOCKQUOTE_RE.sub(_remover(keep, ""), text)
    return _EMPHASIS_RE.sub(_remover(keep, ""), text)


def strip_markup(text: str, policy: MarkupPolicy, keep: FrozenSet[str] = _NO_KEEP) -> str:
    """Apply the enabled markup modes (HTML, fences, inline) until nothing changes.

    Repeating catches markup that only appears once an outer layer is gone,
    e.g. decoded ``&lt;b&gt;`` or ``<scr<b>ipt>``. Every change shortens the text,
    so the loop ends.
    """
    previous = None
    while text != previous:
        previous = text
        if policy.html:
            text = strip_html(text, keep)
        if policy.markdown_fences:
            text = strip_code_fences(text, keep)
        if policy.markdown_inline:
            text = strip_inline_markdown(text, keep)
    return text
