import logging
import re

from flask import Flask, g, redirect, request

from marketplace.i18n.locales import (
    DEFAULT_LOCALE, LOCALE_COOKIE, LOCALES, is_supported, split_locale
)

logger = logging.getLogger(__name__)

# /<locale>/admin and below; the admin lives outside the locale tree
LOCALIZED_ADMIN_ROUTE = re.compile(r"^/(?:%s)/admin(?:/.*)?$" % "|".join(LOCALES))

# Paths the locale middleware never touches
PASSTHROUGH_PREFIXES = ("/api", "/health", "/static", "/_next", "/_vercel", "/admin")


def _is_passthrough(path: str) -> bool:
    for prefix in PASSTHROUGH_PREFIXES:
        if path == prefix or path.startswith(prefix + "/"):
            return True
    # Files such as /favicon.ico or /robots.txt
    last_segment = path.rsplit("/", 1)[-1]
    return "." in last_segment


def _with_query(target: str) -> str:
    query = request.query_string.decode("utf-8")
    return f"{target}?{query}" if query else target


def detect_locale() -> str:
    """Cookie first, then Accept-Language, then the default locale."""
    cookie_locale = request.cookies.get(LOCALE_COOKIE)
    if is_supported(cookie_locale):
        return cookie_locale
    return request.accept_languages.best_match(LOCALES) or DEFAULT_LOCALE


def locale_middleware():
    path = request.path
    g.locale = DEFAULT_LOCALE
    g.locale_from_path = False

    if LOCALIZED_ADMIN_ROUTE.match(path):
        _, admin_path = split_locale(path)
        logger.debug(f"Redirecting localized admin route {path} -> {admin_path}")
        return redirect(_with_query(admin_path), code=307)

    if _is_passthrough(path):
        return None

    locale, _ = split_locale(path)
    if locale:
        g.locale = locale
        g.locale_from_path = True
        return None

    target = f"/{detect_locale()}" + ("" if path == "/" else path)
    return redirect(_with_query(target), code=307)


def remember_locale(response):
    """Persist the locale of a localized page so the next bare URL lands on it."""
    if getattr(g, "locale_from_path", False) and request.cookies.get(LOCALE_COOKIE) != g.locale:
        response.set_cookie(LOCALE_COOKIE, g.locale, samesite="Lax", path="/")
    return response


def init_locale_middleware(app: Flask) -> None:
    app.before_request(locale_middleware)
    app.after_request(remember_locale)
