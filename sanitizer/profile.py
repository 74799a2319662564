"""
Cleaning profiles.

A Profile is an immutable description of every policy switch the pipeline
honours. Attribute names are the Python-facing names; the JSON configuration
format uses the aliases (``nfkc_compat``, ``strip_markup``, ...). Both are
accepted on input, output always uses the JSON names.
"""

from __future__ import annotations

import json
import logging
import re
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator

from .errors import ProfileError

logger = logging.getLogger(__name__)

_CODE_POINT_NOTATION = re.compile(r"^[Uu]\+([0-9A-Fa-f]{4,6})$")


class NormalizeForm(str, Enum):
    NFC = "NFC"
    NFD = "NFD"
    NFKC = "NFKC"
    NFKD = "NFKD"


class PrivateUseScope(str, Enum):
    NONE = "none"
    BMP_ONLY = "bmp_only"
    ALL = "all"


class VariationSelectorPolicy(str, Enum):
    NONE = "none"
    EMOJI_SAFEKEEP = "emoji_safekeep"
    ALL = "all"


def parse_code_point(value: str) -> str:
    """Return the single character named by ``value``.

    Accepts a one-character string or ``U+XXXX`` notation.
    """
    if len(value) == 1:
        return value
    match = _CODE_POINT_NOTATION.match(value)
    if match:
        cp = int(match.group(1), 16)
        if cp <= 0x10FFFF:
            return chr(cp)
    raise ValueError(f"expected a single code point or U+XXXX, got {value!r}")


def _code_points(values: Tuple[str, ...]) -> Tuple[str, ...]:
    return tuple(parse_code_point(v) for v in values)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class MarkupPolicy(_Frozen):
    html: bool = Field(default=False, alias="html_xml")
    markdown_fences: bool = Field(default=False, alias="code_fences")
    markdown_inline: bool = Field(default=False, alias="markdown")

    @property
    def enabled(self) -> bool:
        return self.html or self.markdown_fences or self.markdown_inline


class CategoryPolicy(_Frozen):
    control: bool = Field(default=False, alias="Cc_controls")
    format: bool = Field(default=False, alias="Cf_format_controls")
    surrogate: bool = Field(default=False, alias="Cs_surrogates")


class LanguageOverride(_Frozen):
    allow: Tuple[str, ...] = ()
    comments: Optional[str] = None

    @field_validator("allow")
    @classmethod
    def _check_allow(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        return _code_points(value)


class Profile(_Frozen):
    version: str = "1.2"
    normalize_form: NormalizeForm = Field(default=NormalizeForm.NFC, alias="normalize")
    use_compatibility_normalize: bool = Field(default=False, alias="nfkc_compat")
    collapse_whitespace: bool = False
    markup_policy: MarkupPolicy = Field(default_factory=MarkupPolicy, alias="strip_markup")
    category_policy: CategoryPolicy = Field(default_factory=CategoryPolicy, alias="remove_categories")
    remove_noncharacters: bool = False
    private_use_policy: PrivateUseScope = Field(default=PrivateUseScope.NONE, alias="remove_private_use")
    remove_isolated_combining_marks: bool = False
    strip_directionality_controls: bool = False
    strip_soft_hyphen_and_discretionary: bool = Field(default=False, alias="strip_soft_hyphen_discretionary")
    strip_invisible_separators: bool = False
    strip_tag_characters: bool = Field(default=False, alias="strip_tag_chars")
    variation_selector_policy: VariationSelectorPolicy = Field(
        default=VariationSelectorPolicy.NONE, alias="strip_variation_selectors"
    )
    strip_bom_anywhere: bool = False
    language_overrides: Mapping[str, LanguageOverride] = Field(default_factory=dict, validate_default=True)
    hard_allowlist: Tuple[str, ...] = ()
    # Informational: enforced through the switches above, never as a rule of its own.
    hard_blocklist: Tuple[str, ...] = ()

    @field_validator("hard_allowlist", "hard_blocklist")
    @classmethod
    def _check_code_points(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        return _code_points(value)

    @field_validator("language_overrides")
    @classmethod
    def _freeze_overrides(cls, value: Mapping[str, LanguageOverride]) -> Mapping[str, LanguageOverride]:
        # presets derived with model_copy share this mapping
        return MappingProxyType(dict(value))

    @field_serializer("language_overrides")
    def _dump_overrides(self, value: Mapping[str, LanguageOverride]) -> Dict[str, LanguageOverride]:
        return dict(value)

    def override_for(self, language_tag: Optional[str]) -> Optional[LanguageOverride]:
        """Find the language override for a tag.

        Tries the exact key, then a case-insensitive match, then the primary
        subtag (``ar-EG`` and ``ar_EG`` both fall back to ``ar``). A tag that is
        not a key of ``language_overrides`` can therefore still select an
        override: ``AR`` and ``ar-EG`` both resolve to the ``ar`` entry.
        """
        if not language_tag:
            return None
        if language_tag in self.language_overrides:
            return self.language_overrides[language_tag]

        folded = {key.lower(): value for key, value in self.language_overrides.items()}
        tag = language_tag.lower()
        if tag in folded:
            return folded[tag]
        primary = re.split(r"[-_]", tag, maxsplit=1)[0]
        return folded.get(primary)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        """Build a profile from its JSON form.

        Raises:
            ProfileError: If a field is missing its expected type, an enum
                value is unknown or an unknown key is present.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ProfileError(f"invalid profile: {exc}") from exc

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "Profile":
        """Load a profile from a JSON file.

        Raises:
            ProfileError: If the file cannot be read or does not describe a
                valid profile.
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise ProfileError(f"cannot load profile from {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ProfileError(f"profile file {path} must contain a JSON object")
        logger.info("Loaded profile %s (version %s)", path, data.get("version"))
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, path: Union[str, Path]) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=True)


def load_profile(path: Union[str, Path]) -> Profile:
    return Profile.from_json(path)


def effective_allow_set(profile: Profile, language_tag: Optional[str] = None) -> FrozenSet[str]:
    """Union of the hard allow-list and the language override's allow-list.

    Built fresh for every call; callers must not cache it across tags.
    """
    allowed = set(profile.hard_allowlist)
    override = profile.override_for(language_tag)
    if override is not None:
        allowed.update(override.allow)
    return frozenset(allowed)
