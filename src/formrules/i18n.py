"""Internationalization (i18n) support using gettext.

Validation messages are produced in two languages at once (the primary and the
alternate language of :class:`~formrules.config.EngineConfig`), so unlike a UI
translation layer every lookup names its language explicitly.
"""

import gettext as gettext_module
import logging
import threading
from pathlib import Path

logger = logging.getLogger(__name__)

DOMAIN = "formrules"
LOCALE_DIR = Path(__file__).parent / "locales"

# Message ids of the generated default validation messages
MSG_REQUIRED = "{label} is required"
MSG_MIN_LENGTH = "{label} must be at least {min_length} characters"
MSG_MAX_LENGTH = "{label} must not exceed {max_length} characters"
MSG_PATTERN = "{label} format is invalid"
MSG_EMAIL = "{label} must be a valid email address"
MSG_MIN_VALUE = "{label} must be at least {min_value}"
MSG_MAX_VALUE = "{label} must not exceed {max_value}"
MSG_NOT_A_NUMBER = "{label} must be a number"
MSG_AT_LEAST_ONE = "At least one of these fields is required: {fields}"
MSG_ALL_OR_NONE = "Either all or none of these fields must be filled: {fields}"
MSG_MUTUALLY_EXCLUSIVE = "Only one of these fields may be filled: {fields}"
MSG_INVALID_DATE = "{label} must be a valid date"
MSG_DATE_TOO_EARLY = "{label} must not be before {date}"
MSG_DATE_TOO_LATE = "{label} must not be after {date}"
MSG_INVALID_FILE_TYPE = "{label} only accepts these file types: {extensions}"
MSG_FILE_TOO_LARGE = "{label} files must not exceed {max_size} bytes"
MSG_TOO_MANY_FILES = "{label} accepts a single file"
MSG_TOO_MANY_ROWS = "{label} must not have more than {max_rows} rows"

BUILTIN_CATALOGS: dict[str, dict[str, str]] = {
    "fr": {
        MSG_REQUIRED: "{label} est requis",
        MSG_MIN_LENGTH: "{label} doit contenir au moins {min_length} caractères",
        MSG_MAX_LENGTH: "{label} ne doit pas dépasser {max_length} caractères",
        MSG_PATTERN: "Le format de {label} est invalide",
        MSG_EMAIL: "{label} doit être une adresse courriel valide",
        MSG_MIN_VALUE: "{label} doit être au moins {min_value}",
        MSG_MAX_VALUE: "{label} ne doit pas dépasser {max_value}",
        MSG_NOT_A_NUMBER: "{label} doit être un nombre",
        MSG_AT_LEAST_ONE: "Au moins un de ces champs est requis: {fields}",
        MSG_ALL_OR_NONE: "Tous ces champs ou aucun doivent être remplis: {fields}",
        MSG_MUTUALLY_EXCLUSIVE: "Un seul de ces champs peut être rempli: {fields}",
        MSG_INVALID_DATE: "{label} doit être une date valide",
        MSG_DATE_TOO_EARLY: "{label} ne doit pas être avant le {date}",
        MSG_DATE_TOO_LATE: "{label} ne doit pas être après le {date}",
        MSG_INVALID_FILE_TYPE: "{label} accepte seulement ces types de fichiers: {extensions}",
        MSG_FILE_TOO_LARGE: "Les fichiers de {label} ne doivent pas dépasser {max_size} octets",
        MSG_TOO_MANY_FILES: "{label} accepte un seul fichier",
        MSG_TOO_MANY_ROWS: "{label} ne doit pas avoir plus de {max_rows} lignes",
    },
}

# Thread-local storage for translations
_thread_local = threading.local()


class CatalogTranslations(gettext_module.NullTranslations):
    """Translations backed by an in-package message catalog."""

    def __init__(self, catalog: dict[str, str]):
        super().__init__()
        self._catalog = catalog

    def gettext(self, message: str) -> str:
        translated = self._catalog.get(message)
        if translated is None:
            return super().gettext(message)
        return translated


def _get_translation(language: str | None) -> gettext_module.NullTranslations:
    """Get translation for a language (thread-safe with lazy loading)."""
    if not hasattr(_thread_local, "translations"):
        _thread_local.translations = {}
    cache = _thread_local.translations
    key = language or ""
    if key not in cache:
        cache[key] = _load_translation(language)
    return cache[key]


def gettext(message: str, language: str | None = None) -> str:
    """Translate a message id into the given language.

    Args:
        message: Message id (English source text)
        language: Language code; None returns the message id unchanged

    Returns:
        Translated message
    """
    return _get_translation(language).gettext(message)


def format_message(message: str, language: str | None = None, **kwargs) -> str:
    """Translate a message id and fill in its placeholders."""
    return gettext(message, language).format(**kwargs)


def reset() -> None:
    """Drop the cached translations of the current thread."""
    if hasattr(_thread_local, "translations"):
        _thread_local.translations.clear()


def _load_translation(language: str | None = None) -> gettext_module.NullTranslations:
    """Load gettext translation object with fallback.

    Compiled catalogs under ``locales/`` take precedence; otherwise the
    built-in catalog for the language is used, and finally the message ids.

    Args:
        language: Language code (e.g., "fr", "en", "fr_CA")
                 If None, returns NullTranslations (fallback to msgid)
    """
    if not language:
        return gettext_module.NullTranslations()

    builtin = BUILTIN_CATALOGS.get(language) or BUILTIN_CATALOGS.get(language.split("_")[0])
    fallback = (
        CatalogTranslations(builtin) if builtin else gettext_module.NullTranslations()
    )

    try:
        translation = gettext_module.translation(
            domain=DOMAIN,
            localedir=str(LOCALE_DIR),
            languages=[language],
        )
    except OSError:
        logger.debug(f"No compiled catalog for {language}, using built-in messages")
        return fallback

    translation.add_fallback(fallback)
    logger.info(f"Loaded translation for language: {language}")
    return translation
