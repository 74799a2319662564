"""
Sanitization pipeline.

Stages, in order:
- markup stripping (HTML/XML, code fences, inline Markdown), after dropping
  the code points the filter removes anyway
- initial normalization (NFKC when compatibility folding is on)
- per-code-point filtering against the profile, allow-list first
- bidi control stripping
- isolated combining mark removal
- whitespace collapsing
- final normalization to the profile's form

Each call is fully parameterized by (text, profile, language tag); nothing
is shared between calls.
"""

from __future__ import annotations

import base64
import codecs
import hashlib
import logging
import unicodedata
from collections import Counter
from functools import partial
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Tuple

from charset_normalizer import from_bytes

from .classifiers import (
    is_base_character,
    is_bidi_control,
    is_combining_mark,
    is_control,
    is_format_control,
    is_invisible,
    is_noncharacter,
    is_private_use,
    is_surrogate,
    is_tag_character,
    is_variation_selector,
)
from .errors import SanitizationError
from .markup import strip_markup
from .profile import (
    NormalizeForm,
    PrivateUseScope,
    Profile,
    VariationSelectorPolicy,
    effective_allow_set,
)
from .rules import BOM, OUTPUT_ENCODING, SOFT_HYPHEN, STATS_INVISIBLES, UNICODE_VERSION
from .whitespace import collapse_whitespace

logger = logging.getLogger(__name__)

DropRule = Tuple[str, Callable[[int], bool]]


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _normalize(text: str, form: NormalizeForm) -> str:
    return unicodedata.normalize(NormalizeForm(form).value, text)


def _drop_rules(profile: Profile) -> List[DropRule]:
    """The enabled filter rules, in evaluation order."""
    rules: List[DropRule] = []
    categories = profile.category_policy

    if categories.control:
        rules.append(("control", is_control))
    if profile.strip_bom_anywhere:
        rules.append(("bom", lambda cp: cp == BOM))
    if categories.format:
        rules.append(("format", is_format_control))
    if categories.surrogate:
        rules.append(("surrogate", is_surrogate))
    if profile.strip_invisible_separators:
        rules.append(("invisible", is_invisible))
    if profile.strip_soft_hyphen_and_discretionary:
        rules.append(("soft_hyphen", lambda cp: cp == SOFT_HYPHEN))
    if profile.strip_tag_characters:
        rules.append(("tag", is_tag_character))

    vs_policy = profile.variation_selector_policy
    if vs_policy != VariationSelectorPolicy.NONE:
        keep_emoji = vs_policy == VariationSelectorPolicy.EMOJI_SAFEKEEP
        rules.append(("variation_selector", partial(is_variation_selector, keep_emoji=keep_emoji)))

    if profile.remove_noncharacters:
        rules.append(("noncharacter", is_noncharacter))
    if profile.private_use_policy != PrivateUseScope.NONE:
        rules.append(("private_use", partial(is_private_use, scope=profile.private_use_policy)))
    return rules


def filter_code_points(
    text: str, profile: Profile, allowed: FrozenSet[str], removed: Optional[Counter] = None
) -> str:
    """Drop every code point matched by an enabled rule; the first match wins.

    Code points in ``allowed`` are kept without consulting any rule.
    """
    rules = _drop_rules(profile)
    out = []
    for ch in text:
        if ch in allowed:
            out.append(ch)
            continue
        cp = ord(ch)
        for name, matches in rules:
            if matches(cp):
                if removed is not None:
                    removed[name] += 1
                break
        else:
            out.append(ch)
    return "".join(out)


def strip_bidi_controls(text: str, allowed: FrozenSet[str] = frozenset()) -> str:
    return "".join(ch for ch in text if ch in allowed or not is_bidi_control(ord(ch)))


def remove_isolated_marks(text: str, allowed: FrozenSet[str] = frozenset()) -> str:
    """Remove combining marks that do not follow a letter or number.

    A run of marks stays attached to the base before it, so ``e`` followed
    by two accents keeps both.
    """
    out = []
    attached = False
    for ch in text:
        cp = ord(ch)
        if is_combining_mark(cp):
            if attached or ch in allowed:
                out.append(ch)
            continue
        attached = is_base_character(cp)
        out.append(ch)
    return "".join(out)


def _run(text: str, profile: Profile, language_tag: Optional[str], removed: Counter) -> str:
    allowed = effective_allow_set(profile, language_tag)

    if profile.markup_policy.enabled:
        # code points the filter drops anyway must not hide markup from the stripper
        text = filter_code_points(text, profile, allowed, removed)
        before = len(text)
        text = strip_markup(text, profile.markup_policy, allowed)
        removed["markup"] += max(before - len(text), 0)

    form = NormalizeForm.NFKC if profile.use_compatibility_normalize else profile.normalize_form
    text = _normalize(text, form)

    text = filter_code_points(text, profile, allowed, removed)

    if profile.strip_directionality_controls:
        before = len(text)
        text = strip_bidi_controls(text, allowed)
        removed["bidi"] += before - len(text)

    if profile.remove_isolated_combining_marks:
        before = len(text)
        text = remove_isolated_marks(text, allowed)
        removed["isolated_mark"] += before - len(text)

    if profile.collapse_whitespace:
        before = len(text)
        text = collapse_whitespace(text, allowed)
        removed["whitespace"] += before - len(text)

    return _normalize(text, profile.normalize_form)


def text_stats(original: str, cleaned: str) -> Dict[str, Any]:
    """Length statistics for a cleaning run, counted in code points."""
    original_length = len(original)
    cleaned_length = len(cleaned)
    removed_chars = original_length - cleaned_length
    return {
        "original_length": original_length,
        "cleaned_length": cleaned_length,
        "removed_chars": removed_chars,
        "reduction_percent": round(removed_chars / original_length * 100, 1) if original_length else 0.0,
        "invisible_chars": sum(1 for ch in original if ch in STATS_INVISIBLES),
    }


def sanitize_with_report(
    text: Any, profile: Profile, language_tag: Optional[str] = None
) -> Tuple[str, Dict[str, Any]]:
    """Clean ``text`` and describe what changed.

    Absent or non-string input yields an empty result. Any unexpected error
    raises SanitizationError instead of returning partially cleaned text.
    """
    if not isinstance(text, str):
        text = ""

    removed: Counter = Counter()
    cleaned = ""
    if text:
        try:
            cleaned = _run(text, profile, language_tag, removed)
        except Exception as exc:
            logger.exception("Sanitization failed (input length %d)", len(text))
            raise SanitizationError(f"sanitization failed: {exc}") from exc

    report = {
        "summary": text_stats(text, cleaned),
        "removed": dict(removed),
        "profile": {
            "version": profile.version,
            "normalize": NormalizeForm(profile.normalize_form).value,
            "nfkc_compat": profile.use_compatibility_normalize,
        },
        "language": language_tag,
        "unicode_version": UNICODE_VERSION,
    }
    logger.debug(
        "Sanitized %d -> %d chars (lang=%s, removed=%s)",
        len(text), len(cleaned), language_tag, report["removed"],
    )
    return cleaned, report


def sanitize(text: Any, profile: Profile, language_tag: Optional[str] = None) -> str:
    """Return ``text`` cleaned according to ``profile``.

    ``language_tag`` selects the profile's language override, if any.
    """
    return sanitize_with_report(text, profile, language_tag)[0]


def _decode_detected(raw: bytes) -> Tuple[str, str, Optional[str], bool]:
    detected = None
    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding
        try:
            return raw.decode(detected), detected, detected, False
        except (UnicodeDecodeError, LookupError):
            logger.warning("Detected encoding %s failed to decode upload; using UTF-8", detected)
    return raw.decode("utf-8", errors="replace"), "utf-8", detected, True


def decode_text_bytes(raw: bytes) -> Tuple[str, Dict[str, Any]]:
    """
    Decode uploaded bytes to text with LF newlines.

    Rules:
    - A UTF-8 BOM is a signature, not content: decode as utf-8-sig.
    - Strictly valid UTF-8 is taken as UTF-8.
    - Otherwise detect encoding best-effort via charset-normalizer.
    - If decode with the detected encoding fails, try UTF-8 with replacement
      characters and report it.
    """
    detected = None
    decode_fallback = False
    if raw.startswith(codecs.BOM_UTF8):
        text = raw.decode("utf-8-sig")
        decode_used = "utf-8-sig"
    else:
        try:
            text = raw.decode("utf-8")
            decode_used = "utf-8"
        except UnicodeDecodeError:
            text, decode_used, detected, decode_fallback = _decode_detected(raw)

    crlf = text.count("\r\n")
    cr = text.count("\r") - crlf
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    return text, {
        "detected": detected,
        "decode_used": decode_used,
        "decode_fallback": decode_fallback,
        "newlines": {"crlf": crlf, "cr": cr, "changed": bool(crlf or cr)},
    }


def encode_output(text: str) -> bytes:
    """Encode cleaned text as strict UTF-8.

    Raises:
        SanitizationError: If the text still holds lone surrogates, which
            happens when the profile keeps Cs code points.
    """
    try:
        return text.encode(OUTPUT_ENCODING)
    except UnicodeEncodeError as exc:
        raise SanitizationError(
            f"cleaned text is not encodable as {OUTPUT_ENCODING}: lone surrogate at index {exc.start}"
        ) from exc


def sanitize_bytes(raw: bytes, profile: Profile, language_tag: Optional[str] = None) -> Dict[str, Any]:
    """
    Decode, clean and re-encode an uploaded document.
    Returns a dict matching the API's file response envelope.
    """
    text, decoding = decode_text_bytes(raw)
    cleaned, report = sanitize_with_report(text, profile, language_tag)
    report["decoding"] = decoding

    encoded = encode_output(cleaned)
    return {
        "sanitized_file": {
            "sha256": _sha256_hex(encoded),
            "encoding": OUTPUT_ENCODING,
            "content_b64": base64.b64encode(encoded).decode("ascii"),
        },
        "report": report,
    }
