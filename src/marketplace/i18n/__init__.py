from marketplace.i18n.locales import (
    DEFAULT_LOCALE,
    LOCALES,
    build_localized_names,
    get_messages,
    language_selector,
    localized_name,
    localized_path,
    resolve_locale,
    translate,
)

__all__ = [
    "DEFAULT_LOCALE",
    "LOCALES",
    "build_localized_names",
    "get_messages",
    "language_selector",
    "localized_name",
    "localized_path",
    "resolve_locale",
    "translate",
]
