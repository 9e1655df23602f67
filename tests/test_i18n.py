"""Tests for the I18nService translation lookup and fallback."""

from __future__ import annotations

from pathlib import Path

from devfinder.i18n import I18nService


def test_gettext_returns_translated_string(tmp_path: Path):
    locale_dir = tmp_path / "locales"
    locale_dir.mkdir()
    (locale_dir / "en.json").write_text('{"greet": "Hello {name}"}', encoding="utf-8")
    service = I18nService(locales_path=locale_dir, default_locale="en")

    assert service.gettext("greet", name="World") == "Hello World"


def test_gettext_normalizes_region_and_falls_back(tmp_path: Path):
    locale_dir = tmp_path / "locales"
    locale_dir.mkdir()
    (locale_dir / "en.json").write_text('{"greet": "Hello", "bye": "Bye"}', encoding="utf-8")
    (locale_dir / "de.json").write_text('{"greet": "Hallo"}', encoding="utf-8")
    service = I18nService(locales_path=locale_dir, default_locale="en-GB")

    assert service.gettext("greet", locale="de_AT") == "Hallo"
    assert service.gettext("bye", locale="de-DE") == "Bye"
    assert service.gettext("greet", locale="es") == "Hello"
    assert service.gettext("missing.key") == "missing.key"


def test_bundled_locale_has_directory_strings():
    service = I18nService()

    assert service.gettext("directory.loading") == "Loading developers..."
    assert service.gettext("directory.empty") == "No developers found matching your criteria."
