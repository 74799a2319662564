import base64

from fastapi.testclient import TestClient

from sanitizer import main
from sanitizer.config import Settings
from sanitizer.main import app

client = TestClient(app)


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_presets_lists_every_mode():
    r = client.get("/presets")
    assert r.status_code == 200

    names = {p["name"] for p in r.json()}
    assert names == {"emoji-safe", "max-sterile", "markup-intact", "thai-khmer", "arabic-indic"}
    arabic = next(p for p in r.json() if p["name"] == "arabic-indic")
    assert arabic["language"] == "ar"
    # profiles are exposed in their JSON configuration form
    assert arabic["profile"]["strip_variation_selectors"] == "emoji_safekeep"


def test_sanitize_with_default_preset():
    r = client.post("/sanitize", json={"text": "he\u200bllo <b>world</b>"})
    assert r.status_code == 200

    data = r.json()
    assert data["text"] == "hello world"
    summary = data["report"]["summary"]
    assert summary["original_length"] == 19
    assert summary["cleaned_length"] == 11
    assert summary["removed_chars"] == 8
    assert summary["reduction_percent"] == 42.1
    assert summary["invisible_chars"] == 1
    # ZWSP is a format control, so the Cf rule claims it first
    assert data["report"]["removed"]["format"] == 1


def test_sanitize_preset_mode_supplies_language():
    r = client.post("/sanitize", json={"text": "\u0644\u200d\u0645", "preset": "arabic-indic"})
    assert r.status_code == 200
    assert r.json()["text"] == "\u0644\u200d\u0645"
    assert r.json()["report"]["language"] == "ar"

    r = client.post("/sanitize", json={"text": "\u0644\u200d\u0645", "preset": "emoji-safe"})
    assert r.json()["text"] == "\u0644\u0645"


def test_sanitize_with_inline_profile():
    profile = {"normalize": "NFC", "remove_categories": {"Cc_controls": True}}
    r = client.post("/sanitize", json={"text": "a\u0000b\u200b", "profile": profile})
    assert r.status_code == 200
    assert r.json()["text"] == "ab\u200b"


def test_sanitize_missing_text_is_empty():
    r = client.post("/sanitize", json={"preset": "max-sterile"})
    assert r.status_code == 200
    assert r.json()["text"] == ""
    assert r.json()["report"]["summary"]["original_length"] == 0


def test_unknown_preset_is_rejected():
    r = client.post("/sanitize", json={"text": "x", "preset": "nope"})
    assert r.status_code == 422
    assert "unknown preset" in r.json()["detail"]


def test_malformed_profile_is_rejected():
    r = client.post("/sanitize", json={"text": "x", "profile": {"normalize": "NFX"}})
    assert r.status_code == 422


def test_lone_surrogate_in_output_is_a_server_error():
    body = '{"text": "a\\ud800b", "profile": {}}'
    r = client.post("/sanitize", content=body, headers={"content-type": "application/json"})
    assert r.status_code == 500
    assert "surrogate" in r.json()["detail"]


def test_lone_surrogate_removed_by_profile():
    body = '{"text": "a\\ud800b", "profile": {"remove_categories": {"Cs_surrogates": true}}}'
    r = client.post("/sanitize", content=body, headers={"content-type": "application/json"})
    assert r.status_code == 200
    assert r.json()["text"] == "ab"


def test_sanitize_file_latin1_html():
    # Latin-1 input forces non-UTF-8 decoding
    raw = "<p>Montréal</p>\r\n".encode("latin-1")

    files = {"file": ("page.html", raw, "text/html")}
    r = client.post("/sanitize/file", files=files)
    assert r.status_code == 200

    data = r.json()
    assert data["sanitized_file"]["encoding"] == "utf-8"
    out_text = base64.b64decode(data["sanitized_file"]["content_b64"]).decode("utf-8")
    assert "Montréal" in out_text
    assert "<p>" not in out_text
    assert data["report"]["decoding"]["newlines"]["crlf"] == 1


def test_sanitize_file_utf8_bom_and_form_fields():
    raw = "\ufeffsa\u200bwat\u0e14\u0e35".encode("utf-8")

    files = {"file": ("note.txt", raw, "text/plain")}
    r = client.post("/sanitize/file", files=files, data={"preset": "emoji-safe", "language": "th"})
    assert r.status_code == 200

    data = r.json()
    out_text = base64.b64decode(data["sanitized_file"]["content_b64"]).decode("utf-8")
    assert out_text == "sa\u200bwat\u0e14\u0e35"
    assert data["report"]["decoding"]["decode_used"] == "utf-8-sig"
    assert data["report"]["language"] == "th"


def test_sanitize_file_rejects_unsupported_type():
    files = {"file": ("scan.pdf", b"%PDF-1.4", "application/pdf")}
    r = client.post("/sanitize/file", files=files)
    assert r.status_code == 422


def test_sanitize_file_rejects_oversized_upload(monkeypatch):
    monkeypatch.setattr(main, "settings", Settings(max_upload_bytes=4))

    files = {"file": ("big.txt", b"0123456789", "text/plain")}
    r = client.post("/sanitize/file", files=files)
    assert r.status_code == 413
