from __future__ import annotations

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

from .profile import Profile


class SanitizeRequest(BaseModel):
    text: Optional[str] = None
    preset: Optional[str] = Field(default=None, examples=["emoji-safe"])
    profile: Optional[Profile] = None
    language: Optional[str] = Field(default=None, examples=["ar"])


class SanitizeStats(BaseModel):
    original_length: int = 0
    cleaned_length: int = 0
    removed_chars: int = 0
    reduction_percent: float = 0.0
    invisible_chars: int = 0


class ProfileSummary(BaseModel):
    version: str
    normalize: str
    nfkc_compat: bool


class SanitizeReport(BaseModel):
    summary: SanitizeStats
    removed: Dict[str, int] = Field(default_factory=dict)
    profile: ProfileSummary
    language: Optional[str] = None
    unicode_version: str
    decoding: Optional[Dict[str, Any]] = None


class SanitizeResponse(BaseModel):
    text: str
    report: SanitizeReport


class SanitizedFile(BaseModel):
    sha256: str
    encoding: str = Field(default="utf-8")
    content_b64: str


class SanitizeFileResponse(BaseModel):
    sanitized_file: SanitizedFile
    report: SanitizeReport


class PresetInfo(BaseModel):
    name: str
    description: str
    language: Optional[str] = None
    profile: Dict[str, Any]


class HealthResponse(BaseModel):
    ok: bool = True
