"""
Service configuration from environment variables.

A ``.env`` file in the working directory is merged into the environment
first. Variables:
- SANITIZER_DEFAULT_PRESET: preset mode used when a request names none
- SANITIZER_PROFILE_PATH: JSON profile used instead of the default preset
- SANITIZER_MAX_UPLOAD_BYTES: upload limit for the file endpoint
- SANITIZER_LOG_LEVEL: log level for the HTTP app
"""

from __future__ import annotations

import functools
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ProfileError
from .presets import PresetMode, get_preset
from .profile import Profile, load_profile

ENV_PREFIX = "SANITIZER_"
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    default_preset: str = "emoji-safe"
    profile_path: Optional[Path] = None
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``SANITIZER_*`` environment variables.

        Raises:
            ProfileError: If a value is malformed or names an unknown preset.
        """
        load_dotenv()
        env = os.environ

        default_preset = env.get(f"{ENV_PREFIX}DEFAULT_PRESET", cls.default_preset)
        get_preset(default_preset)

        raw_limit = env.get(f"{ENV_PREFIX}MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES))
        try:
            max_upload_bytes = int(raw_limit)
        except ValueError:
            raise ProfileError(f"{ENV_PREFIX}MAX_UPLOAD_BYTES must be an integer, got {raw_limit!r}") from None

        profile_path = env.get(f"{ENV_PREFIX}PROFILE_PATH")
        return cls(
            default_preset=default_preset,
            profile_path=Path(profile_path) if profile_path else None,
            max_upload_bytes=max_upload_bytes,
            log_level=env.get(f"{ENV_PREFIX}LOG_LEVEL", cls.log_level).upper(),
        )

    @functools.cached_property
    def default_mode(self) -> PresetMode:
        """Profile and language used when a request specifies neither."""
        if self.profile_path is not None:
            profile: Profile = load_profile(self.profile_path)
            return PresetMode(profile, None, f"Custom profile from {self.profile_path}")
        return get_preset(self.default_preset)


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
