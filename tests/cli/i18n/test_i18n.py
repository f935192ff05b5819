# tests/cli/i18n/test_i18n.py
"""
Tests for cli/i18n - Internationalization module

Tests cover:
- Language context management
- Translation function (t) and fallbacks
- Message registry (cli, explorer namespaces)
- Format string interpolation
"""

import pytest

from cli.i18n import DEFAULT_LANG, SUPPORTED_LANGS, get_lang, set_lang, t
from cli.i18n.messages import MESSAGES, register_messages
from cli.i18n.messages.cli_commands import CLI_MESSAGES
from cli.i18n.messages.explorer import EXPLORER_MESSAGES

# =============================================================================
# Language Context Tests
# =============================================================================


class TestLanguageContext:
    """Test language context management"""

    def test_defaults(self):
        """Default language is Korean"""
        assert DEFAULT_LANG == "ko"
        assert SUPPORTED_LANGS == ("ko", "en")
        assert get_lang() == "ko"

    def test_set_lang_english(self):
        set_lang("en")
        assert get_lang() == "en"

    def test_set_lang_invalid(self):
        """Invalid language falls back to Korean"""
        set_lang("en")
        set_lang("fr")
        assert get_lang() == "ko"


# =============================================================================
# Translation Function Tests
# =============================================================================


class TestTranslationFunction:
    """Test translation function (t)"""

    def test_korean_by_default(self):
        assert t("explorer.ready") == "명령 모드 준비 완료."

    def test_current_language(self):
        set_lang("en")
        assert t("explorer.ready") == "Command mode ready."

    def test_lang_override_keeps_context(self):
        assert t("explorer.ready", lang="en") == "Command mode ready."
        assert get_lang() == "ko"

    def test_unsupported_override_uses_default(self):
        assert t("explorer.ready", lang="fr") == "명령 모드 준비 완료."

    def test_nonexistent_key(self):
        """Nonexistent key returns key itself"""
        assert t("nonexistent.key") == "nonexistent.key"

    def test_format(self):
        text = t("cli.catalog_loaded", lang="en", path="inventory.yaml")
        assert text == "Catalog loaded: inventory.yaml"

    def test_format_multiple_params(self):
        text = t("explorer.banner_subtitle", lang="en", context="vc-lab", mode="RO", actor="alice")
        assert text == "Context: vc-lab | Mode: RO | Actor: alice"

    def test_missing_format_param_returns_template(self):
        """Missing format parameter is handled gracefully"""
        assert t("cli.catalog_loaded", lang="en", wrong="x") == "Catalog loaded: {path}"

    def test_missing_english_falls_back(self):
        register_messages("fallback", {"only_ko": {"ko": "한국어만"}})  # type: ignore[typeddict-item]
        assert t("fallback.only_ko", lang="en") == "한국어만"


# =============================================================================
# Message Registry Tests
# =============================================================================


class TestMessageRegistry:
    """Test message registry structure"""

    def test_namespaces_registered(self):
        assert all(f"cli.{key}" in MESSAGES for key in CLI_MESSAGES)
        assert all(f"explorer.{key}" in MESSAGES for key in EXPLORER_MESSAGES)

    @pytest.mark.parametrize("messages", [CLI_MESSAGES, EXPLORER_MESSAGES])
    def test_every_message_has_both_languages(self, messages):
        for key, value in messages.items():
            assert value.get("ko"), f"Message {key} missing Korean translation"
            assert value.get("en"), f"Message {key} missing English translation"

    def test_placeholders_match_between_languages(self):
        import string

        formatter = string.Formatter()
        for key, value in {**CLI_MESSAGES, **EXPLORER_MESSAGES}.items():
            ko_fields = {name for _, name, _, _ in formatter.parse(value["ko"]) if name}
            en_fields = {name for _, name, _, _ in formatter.parse(value["en"]) if name}
            assert ko_fields == en_fields, f"Placeholder mismatch in {key}"

    def test_register_messages(self):
        register_messages("test", {"test_key": {"ko": "테스트", "en": "Test"}})
        assert t("test.test_key", lang="en") == "Test"
        assert t("test.test_key") == "테스트"
