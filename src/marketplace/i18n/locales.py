import json
import logging
import os
import re
from functools import lru_cache
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

LOCALES = ("en", "fr", "it", "et", "ru")
DEFAULT_LOCALE = "en"
LOCALE_COOKIE = "NEXT_LOCALE"

LANGUAGE_NAMES = {
    "en": "English",
    "fr": "Français",
    "it": "Italiano",
    "et": "Eesti",
    "ru": "Русский",
}

LANGUAGE_FLAGS = {
    "en": "🇺🇸",
    "fr": "🇫🇷",
    "it": "🇮🇹",
    "et": "🇪🇪",
    "ru": "🇷🇺",
}

MESSAGES_DIR = os.path.join(os.path.dirname(__file__), "messages")

_LOCALE_PREFIX = re.compile(r"^/(?:%s)(?=/|$)" % "|".join(LOCALES))


def is_supported(locale: Optional[str]) -> bool:
    return locale in LOCALES


def resolve_locale(locale: Optional[str]) -> str:
    """Return `locale` when supported, otherwise the default locale."""
    return locale if is_supported(locale) else DEFAULT_LOCALE


@lru_cache(maxsize=None)
def get_messages(locale: str) -> Dict[str, Any]:
    """Load the message catalog of a locale (unsupported locales get the default)."""
    path = os.path.join(MESSAGES_DIR, f"{resolve_locale(locale)}.json")
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _lookup(messages: Dict[str, Any], key: str) -> Optional[str]:
    node: Any = messages
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


def translate(locale: str, key: str) -> str:
    """
    Look up a dotted key, e.g. translate("fr", "navigation.home").

    Falls back to the default locale's catalog, then to the key itself.
    """
    value = _lookup(get_messages(locale), key)
    if value is None and resolve_locale(locale) != DEFAULT_LOCALE:
        value = _lookup(get_messages(DEFAULT_LOCALE), key)
    if value is None:
        logger.debug(f"Missing translation for {key!r} in {locale!r}")
        return key
    return value


def localized_name(kind: str, slug: str, fallback: str, locale: str) -> str:
    """Name of a category ("categories") or subcategory ("subcategories") in one locale."""
    return _lookup(get_messages(locale), f"{kind}.{slug}") or fallback


def build_localized_names(kind: str, slug: str, fallback: str) -> Dict[str, str]:
    return {locale: localized_name(kind, slug, fallback, locale) for locale in LOCALES}


def split_locale(path: str):
    """Split "/fr/music" into ("fr", "/music"); paths without a locale give (None, path)."""
    match = _LOCALE_PREFIX.match(path)
    if not match:
        return None, path
    rest = path[match.end():]
    return match.group(0)[1:], rest or "/"


def localized_path(path: str, locale: str) -> str:
    """Swap (or add) the locale prefix of `path`."""
    _, rest = split_locale(path or "/")
    if rest == "/":
        return f"/{resolve_locale(locale)}"
    return f"/{resolve_locale(locale)}{rest}"


def language_selector(current_locale: str, path: str) -> Dict[str, Any]:
    """Everything the language switcher needs: current locale plus one entry per locale."""
    options: List[Dict[str, Any]] = [
        {
            "locale": locale,
            "name": LANGUAGE_NAMES[locale],
            "flag": LANGUAGE_FLAGS[locale],
            "href": localized_path(path, locale),
            "active": locale == current_locale,
        }
        for locale in LOCALES
    ]
    return {
        "locale": current_locale,
        "name": LANGUAGE_NAMES[current_locale],
        "flag": LANGUAGE_FLAGS[current_locale],
        "options": options,
    }
