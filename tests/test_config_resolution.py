"""Configuration resolution tests.

Validates option merging, locale fallback, the shared empty-messages constant,
build-mode reporting, and deprecated option handling.
"""

import dataclasses
import logging
import warnings
from types import MappingProxyType

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tagformat.config import (
    DEFAULT_OPTIONS,
    EMPTY_MESSAGES,
    OPTION_NAMES,
    Configuration,
    default_error_handler,
    is_production,
    resolve_config,
)
from tagformat.diagnostics import (
    FormatterError,
    InvalidConfigurationError,
    UnsupportedLocaleError,
)
from tagformat.locale_data import has_locale_data


def _no_locale_data(locale: str) -> bool:
    return False


def _all_locale_data(locale: str) -> bool:
    return True


class TestLocaleFallback:
    """Unsupported locales fall back to the default locale."""

    def test_unknown_locale_uses_default_locale(self) -> None:
        """A locale without data resolves to default_locale."""
        config = resolve_config("xx-XX", {"default_locale": "de"})
        assert config.locale == "de"

    def test_unknown_locale_drops_messages_and_formats(self) -> None:
        """Messages become the shared constant, formats the default formats."""
        default_formats = {"number": {"money": {"style": "currency", "currency": "EUR"}}}
        config = resolve_config(
            "xx-XX",
            {
                "messages": {"greet": "Hallo"},
                "formats": {"number": {"big": {"use_grouping": True}}},
                "default_formats": default_formats,
            },
        )
        assert config.messages is EMPTY_MESSAGES
        assert config.formats is default_formats

    @given(locale=st.text(max_size=20))
    def test_fallback_locale_is_always_default(self, locale: str) -> None:
        """Property: without locale data the effective locale is default_locale."""
        config = resolve_config(locale, {}, has_locale_data=_no_locale_data)
        assert config.locale == DEFAULT_OPTIONS["default_locale"]
        assert config.messages is EMPTY_MESSAGES

    def test_empty_messages_identity_is_stable(self) -> None:
        """Repeated resolutions share one empty-messages object, not equal copies."""
        first = resolve_config("xx-XX", {"messages": {"a": "A"}})
        second = resolve_config("yy-YY", {"messages": {"b": "B"}})
        assert first.messages is second.messages is EMPTY_MESSAGES

    def test_empty_messages_is_read_only(self) -> None:
        """The shared constant cannot be mutated."""
        assert isinstance(EMPTY_MESSAGES, MappingProxyType)
        with pytest.raises(TypeError):
            EMPTY_MESSAGES["x"] = "y"  # type: ignore[index]


class TestSupportedLocale:
    """Locales with data keep their own options."""

    def test_locale_is_kept(self) -> None:
        assert resolve_config("fr").locale == "fr"

    def test_falsy_locale_uses_default_locale(self) -> None:
        """An empty locale resolves to default_locale when the registry accepts it."""
        config = resolve_config("", {"default_locale": "it"}, has_locale_data=_all_locale_data)
        assert config.locale == "it"

    def test_default_formats_reused_by_identity(self) -> None:
        """Without explicit formats, default_formats is reused referentially."""
        default_formats = {"date": {"short": {"date_style": "short"}}}
        config = resolve_config("en", {"default_formats": default_formats})
        assert config.formats is default_formats
        assert config.default_formats is default_formats

    def test_messages_and_formats_stored_by_reference(self) -> None:
        """Nested mappings replace defaults wholesale and are never copied."""
        messages = {"greet": "Hello"}
        formats = {"number": {"pct": {"style": "percent"}}}
        config = resolve_config("en", {"messages": messages, "formats": formats})
        assert config.messages is messages
        assert config.formats is formats

    def test_missing_messages_use_shared_constant(self) -> None:
        assert resolve_config("en").messages is EMPTY_MESSAGES

    def test_defaults_layer_under_options(self) -> None:
        """Caller defaults sit between DEFAULT_OPTIONS and explicit options."""
        config = resolve_config(
            "en",
            {"default_component": "b"},
            {"default_component": "i", "default_html_element": "em"},
        )
        assert config.default_component == "b"
        assert config.default_html_element == "em"
        assert config.require_other is True


class TestOptionValidation:
    """Option names and types are checked at resolution."""

    def test_unknown_option_raises_type_error(self) -> None:
        with pytest.raises(TypeError, match="defaultLocale"):
            resolve_config("en", {"defaultLocale": "de"})

    def test_non_callable_on_error_rejected(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="on_error"):
            resolve_config("en", {"on_error": "log"})

    def test_option_names_cover_configuration(self) -> None:
        """Every configuration field except locale is an option."""
        names = {f.name for f in dataclasses.fields(Configuration)} - {"locale"}
        assert set(OPTION_NAMES) == names
        assert set(DEFAULT_OPTIONS) == names

    def test_configuration_is_immutable(self) -> None:
        config = resolve_config("en")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.locale = "de"  # type: ignore[misc]


class TestBuildModeReporting:
    """Unsupported locales are reported only in production mode."""

    def test_not_reported_in_development(self, reported: list[FormatterError]) -> None:
        resolve_config("xx-XX", {"on_error": reported.append})
        assert reported == []

    @pytest.mark.usefixtures("production_mode")
    def test_reported_in_production(self, reported: list[FormatterError]) -> None:
        config = resolve_config("xx-XX", {"on_error": reported.append, "default_locale": "de"})

        assert config.locale == "de"
        assert len(reported) == 1
        error = reported[0]
        assert isinstance(error, UnsupportedLocaleError)
        assert error.locale_code == "xx-XX"
        assert error.fallback_locale == "de"
        assert "xx-XX" in str(error)

    @pytest.mark.usefixtures("production_mode")
    def test_supported_locale_not_reported(self, reported: list[FormatterError]) -> None:
        resolve_config("en", {"on_error": reported.append})
        assert reported == []

    def test_is_production_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        assert is_production() is False
        monkeypatch.setenv("TAGFORMAT_ENV", " Production ")
        assert is_production() is True
        monkeypatch.setenv("TAGFORMAT_ENV", "development")
        assert is_production() is False

    def test_default_error_handler_logs(self, caplog: pytest.LogCaptureFixture) -> None:
        """The default on_error logs at ERROR level."""
        with caplog.at_level(logging.ERROR, logger="tagformat.config"):
            default_error_handler(FormatterError("boom"))
        assert "boom" in caplog.text


class TestDeprecatedOptions:
    """text_component / text_renderer are accepted with a warning."""

    @pytest.mark.parametrize("option", ["text_component", "text_renderer"])
    def test_warns_in_development(self, option: str) -> None:
        with pytest.warns(FutureWarning, match=option):
            config = resolve_config("en", {option: "p"})
        assert getattr(config, option) == "p"

    @pytest.mark.usefixtures("production_mode")
    def test_silent_in_production(self) -> None:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            resolve_config("en", {"text_component": "p", "text_renderer": "p"})
        assert not [w for w in caught if issubclass(w.category, FutureWarning)]

    def test_one_warning_per_option(self) -> None:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            resolve_config("en", {"text_component": "p", "text_renderer": "p"})
        messages = [str(w.message) for w in caught if issubclass(w.category, FutureWarning)]
        assert len(messages) == 2
        assert all("default_component" in message for message in messages)

    @pytest.mark.parametrize("default_component", ["div", "span", None])
    def test_conflict_with_default_component_rejected(self, default_component: object) -> None:
        """Legacy options and default_component have no defined precedence.

        Passing the default value explicitly is still a conflict.
        """
        with pytest.raises(InvalidConfigurationError, match="default_component"):
            resolve_config(
                "en", {"text_renderer": "p", "default_component": default_component}
            )

    def test_no_warning_without_legacy_options(self) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("error", FutureWarning)
            resolve_config("en", {"default_component": "div"})


class TestLocaleDataRegistry:
    """has_locale_data answers from Babel's CLDR data."""

    @pytest.mark.parametrize("locale", ["en", "en-US", "en_US", "de_DE", "fr", "ar"])
    def test_known_locales(self, locale: str) -> None:
        assert has_locale_data(locale) is True

    @pytest.mark.parametrize("locale", ["xx-XX", "", "not a locale", "zz"])
    def test_unknown_locales(self, locale: str) -> None:
        assert has_locale_data(locale) is False

    def test_non_string_locale(self) -> None:
        assert has_locale_data(None) is False
        assert has_locale_data(42) is False  # type: ignore[arg-type]
