"""i18n module unit tests"""

import pytest

from formrules import i18n


@pytest.fixture(autouse=True)
def reset_translations():
    i18n.reset()
    yield
    i18n.reset()


def test_no_language_returns_message_id():
    assert i18n.gettext(i18n.MSG_REQUIRED) == "{label} is required"


def test_english_uses_message_ids():
    assert i18n.format_message(i18n.MSG_REQUIRED, "en", label="Name") == "Name is required"


def test_builtin_french_catalog():
    assert i18n.format_message(i18n.MSG_REQUIRED, "fr", label="Nom") == "Nom est requis"


def test_regional_variant_falls_back_to_base_language():
    assert i18n.format_message(i18n.MSG_REQUIRED, "fr_CA", label="Nom") == "Nom est requis"


def test_unknown_message_passes_through():
    assert i18n.gettext("Custom message", "fr") == "Custom message"


def test_every_message_has_french_translation():
    messages = [value for name, value in vars(i18n).items() if name.startswith("MSG_")]
    assert set(messages) == set(i18n.BUILTIN_CATALOGS["fr"])


def test_translations_cached_per_language(monkeypatch):
    calls = []
    original = i18n._load_translation

    def counting(language=None):
        calls.append(language)
        return original(language)

    monkeypatch.setattr(i18n, "_load_translation", counting)
    i18n.gettext(i18n.MSG_EMAIL, "fr")
    i18n.gettext(i18n.MSG_PATTERN, "fr")

    assert calls == ["fr"]


def test_missing_compiled_catalogs_fall_back_to_builtin(monkeypatch, tmp_path):
    monkeypatch.setattr(i18n, "LOCALE_DIR", tmp_path / "locales")
    assert i18n.format_message(i18n.MSG_EMAIL, "fr", label="Courriel") == (
        "Courriel doit être une adresse courriel valide"
    )
