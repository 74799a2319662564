import pytest

from sanitizer.errors import ProfileError
from sanitizer.presets import EMOJI_SAFE, MARKUP_INTACT, MAX_STERILE, PRESET_MODES, get_preset
from sanitizer.profile import PrivateUseScope, VariationSelectorPolicy


def _differences(a, b):
    left, right = a.to_dict(), b.to_dict()
    return {key for key in left if left[key] != right[key]}


def test_emoji_safe_policy():
    assert EMOJI_SAFE.markup_policy.enabled
    assert EMOJI_SAFE.private_use_policy == PrivateUseScope.ALL
    assert EMOJI_SAFE.variation_selector_policy == VariationSelectorPolicy.EMOJI_SAFEKEEP
    assert EMOJI_SAFE.hard_allowlist == ("\ufe0e", "\ufe0f")
    assert set(EMOJI_SAFE.hard_blocklist) == {"\u2060", "\u00ad", "\u180e", "\ufeff"}


def test_max_sterile_differs_only_in_folding_and_selectors():
    assert _differences(EMOJI_SAFE, MAX_STERILE) == {
        "nfkc_compat", "strip_variation_selectors", "hard_allowlist",
    }
    assert MAX_STERILE.use_compatibility_normalize
    assert MAX_STERILE.hard_allowlist == ()


def test_markup_intact_differs_only_in_markup():
    assert _differences(EMOJI_SAFE, MARKUP_INTACT) == {"strip_markup"}
    assert not MARKUP_INTACT.markup_policy.enabled


def test_language_overrides_are_carried():
    assert EMOJI_SAFE.override_for("th").allow == ("\u200b",)
    assert EMOJI_SAFE.override_for("hi").allow == ("\u200c", "\u200d")


def test_preset_modes():
    assert get_preset("thai-khmer").profile is EMOJI_SAFE
    assert get_preset("thai-khmer").language == "th"
    assert get_preset("arabic-indic").language == "ar"
    assert get_preset("max-sterile").profile is MAX_STERILE
    assert all(mode.description for mode in PRESET_MODES.values())


def test_unknown_preset():
    with pytest.raises(ProfileError):
        get_preset("extra-clean")
