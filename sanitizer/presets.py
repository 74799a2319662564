"""
Preset profiles.

Script-specific behaviour is not a preset of its own: the presets carry
language overrides, and a language tag switches them on.
"""

from __future__ import annotations

from typing import Dict, NamedTuple, Optional

from .errors import ProfileError
from .profile import (
    CategoryPolicy,
    LanguageOverride,
    MarkupPolicy,
    NormalizeForm,
    PrivateUseScope,
    Profile,
    VariationSelectorPolicy,
)

_ZWSP_SCRIPTS = ("th", "km", "lo", "my")
_JOINER_SCRIPTS = (
    "ar", "fa", "ur", "ps",
    "hi", "mr", "ne", "bn", "pa", "gu", "or", "ta", "te", "kn", "ml", "si",
)

LANGUAGE_OVERRIDES: Dict[str, LanguageOverride] = {
    **{
        tag: LanguageOverride(allow=("\u200b",), comments="ZWSP marks line-break opportunities")
        for tag in _ZWSP_SCRIPTS
    },
    **{
        tag: LanguageOverride(allow=("\u200c", "\u200d"), comments="ZWJ/ZWNJ control cursive joining and conjuncts")
        for tag in _JOINER_SCRIPTS
    },
}

EMOJI_SAFE = Profile(
    version="1.2",
    normalize_form=NormalizeForm.NFC,
    use_compatibility_normalize=False,
    collapse_whitespace=True,
    markup_policy=MarkupPolicy(html=True, markdown_fences=True, markdown_inline=True),
    category_policy=CategoryPolicy(control=True, format=True, surrogate=True),
    remove_noncharacters=True,
    private_use_policy=PrivateUseScope.ALL,
    remove_isolated_combining_marks=True,
    strip_directionality_controls=True,
    strip_soft_hyphen_and_discretionary=True,
    strip_invisible_separators=True,
    strip_tag_characters=True,
    variation_selector_policy=VariationSelectorPolicy.EMOJI_SAFEKEEP,
    strip_bom_anywhere=True,
    language_overrides=LANGUAGE_OVERRIDES,
    hard_allowlist=("\ufe0e", "\ufe0f"),
    hard_blocklist=("\u2060", "\u00ad", "\u180e", "\ufeff"),
)

MAX_STERILE = EMOJI_SAFE.model_copy(
    update={
        "use_compatibility_normalize": True,
        "variation_selector_policy": VariationSelectorPolicy.ALL,
        "hard_allowlist": (),
    }
)

MARKUP_INTACT = EMOJI_SAFE.model_copy(update={"markup_policy": MarkupPolicy()})


class PresetMode(NamedTuple):
    profile: Profile
    language: Optional[str]
    description: str


PRESET_MODES: Dict[str, PresetMode] = {
    "emoji-safe": PresetMode(
        EMOJI_SAFE, None, "Preserves emoji presentation while cleaning invisible characters"
    ),
    "max-sterile": PresetMode(
        MAX_STERILE, None, "Maximum cleaning for archival and security purposes"
    ),
    "markup-intact": PresetMode(
        MARKUP_INTACT, None, "Cleans Unicode while preserving HTML/Markdown formatting"
    ),
    "thai-khmer": PresetMode(
        EMOJI_SAFE, "th", "Preserves ZWSP for Thai/Khmer line-break hints"
    ),
    "arabic-indic": PresetMode(
        EMOJI_SAFE, "ar", "Preserves ZWJ/ZWNJ for proper text shaping"
    ),
}


def get_preset(name: str) -> PresetMode:
    try:
        return PRESET_MODES[name]
    except KeyError:
        known = ", ".join(sorted(PRESET_MODES))
        raise ProfileError(f"unknown preset {name!r} (expected one of: {known})") from None
