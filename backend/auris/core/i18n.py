# auris/core/i18n.py
import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

log = logging.getLogger("uvicorn.error")

SUPPORTED_LANGS = ("es", "en", "ca", "fr", "de", "it")
DEFAULT_LANG = "es"

LOCALES_DIR = Path(__file__).resolve().parents[1] / "locales"


def normalize_lang(value: Optional[str]) -> str:
    if not value:
        return DEFAULT_LANG
    base = value.strip().lower().split("-")[0]
    return base if base in SUPPORTED_LANGS else DEFAULT_LANG


@lru_cache(maxsize=None)
def _load(lang: str) -> Dict[str, str]:
    path = LOCALES_DIR / f"{lang}.json"
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        log.warning(f"[i18n] missing locale file {path.name}")
        return {}


def get_dict(lang: str) -> Dict[str, str]:
    d = _load(lang) if lang in SUPPORTED_LANGS else {}
    return d or _load(DEFAULT_LANG)


def t(lang: str, key: str) -> str:
    """Translation for key, falling back to the default language, then ''."""
    value = get_dict(lang).get(key)
    if value:
        return value
    return _load(DEFAULT_LANG).get(key, "")
