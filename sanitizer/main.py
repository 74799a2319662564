import logging
from typing import List, Optional, Tuple

from fastapi import FastAPI, File, Form, HTTPException, UploadFile

from .config import get_settings
from .errors import ProfileError, SanitizationError
from .models import HealthResponse, PresetInfo, SanitizeFileResponse, SanitizeRequest, SanitizeResponse
from .presets import PRESET_MODES, get_preset
from .profile import Profile
from .rules import SUPPORTED_UPLOAD_EXTENSIONS
from .sanitize import encode_output, sanitize_bytes, sanitize_with_report

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# a broken SANITIZER_PROFILE_PATH stops the app here, not on the first request
default_mode = settings.default_mode

app = FastAPI(
    title="text-sanitizer",
    description="Removes invisible, dangerous and redundant Unicode from text",
    version="0.1.0",
)


def _resolve(
    preset: Optional[str], profile: Optional[Profile], language: Optional[str]
) -> Tuple[Profile, Optional[str]]:
    if profile is not None:
        return profile, language
    try:
        mode = get_preset(preset) if preset else default_mode
    except ProfileError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return mode.profile, language or mode.language


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.get("/presets", response_model=List[PresetInfo])
def presets():
    return [
        {
            "name": name,
            "description": mode.description,
            "language": mode.language,
            "profile": mode.profile.to_dict(),
        }
        for name, mode in PRESET_MODES.items()
    ]


@app.post("/sanitize", response_model=SanitizeResponse)
def sanitize_text(request: SanitizeRequest):
    profile, language = _resolve(request.preset, request.profile, request.language)
    try:
        cleaned, report = sanitize_with_report(request.text, profile, language)
        encode_output(cleaned)
    except SanitizationError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return {"text": cleaned, "report": report}


@app.post("/sanitize/file", response_model=SanitizeFileResponse)
async def sanitize_file(
    file: UploadFile = File(...),
    preset: Optional[str] = Form(default=None),
    language: Optional[str] = Form(default=None),
):
    if not (file.filename or "").lower().endswith(SUPPORTED_UPLOAD_EXTENSIONS):
        raise HTTPException(status_code=422, detail="Only text documents are supported")

    raw = await file.read()
    if len(raw) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail=f"Upload exceeds {settings.max_upload_bytes} bytes")

    profile, language = _resolve(preset, None, language)
    try:
        return sanitize_bytes(raw, profile, language)
    except SanitizationError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
