"""Tests for addressed pattern compilation."""

import re
from types import SimpleNamespace

import pytest

from responder_bot.core.compiler import BotIdentity, compile_addressed, rewrite_source
from responder_bot.core.errors import ConfigurationError, PatternError


class TestBotIdentity:
    """Tests for BotIdentity."""

    def test_single_name(self):
        """Test that a bot without alias is addressed by name only."""
        assert BotIdentity("hedwig").addressing_names() == ["hedwig"]

    def test_longer_alias_first(self, alias_identity: BotIdentity):
        """Test that the longer name is tried first."""
        assert alias_identity.addressing_names() == ["hal9000", "hal"]

    def test_longer_name_first(self):
        """Test ordering when the primary name is the longer one."""
        assert BotIdentity("alfred", aka="al").addressing_names() == ["alfred", "al"]

    def test_equal_length_keeps_name_first(self):
        """Test that equal-length names keep the primary name first."""
        assert BotIdentity("zed", aka="amy").addressing_names() == ["zed", "amy"]

    def test_alias_equal_to_name_collapses(self):
        """Test that a redundant alias is dropped."""
        assert BotIdentity("hal", aka="hal").addressing_names() == ["hal"]

    @pytest.mark.parametrize("name", ["", "   ", None, 42])
    def test_invalid_name(self, name):
        """Test that unusable names are configuration errors."""
        with pytest.raises(ConfigurationError):
            BotIdentity(name).validate()

    def test_blank_alias(self):
        """Test that an empty alias is a configuration error."""
        with pytest.raises(ConfigurationError):
            BotIdentity("hal", aka="").validate()


class TestRewriteSource:
    """Tests for the addressing prefix template."""

    def test_without_alias(self, identity: BotIdentity):
        assert rewrite_source("ping", identity) == r"^\s*[@]?hedwig[:,]?\s*(?:ping)"

    def test_with_alias(self, alias_identity: BotIdentity):
        assert (
            rewrite_source("ping", alias_identity)
            == r"^\s*[@]?(?:hal9000[:,]?|hal[:,]?)\s*(?:ping)"
        )

    def test_name_is_escaped(self):
        """Test that regex metacharacters in names are literal."""
        source = rewrite_source("ping", BotIdentity("r2.d2"))
        assert r"r2\.d2" in source


class TestCompileAddressed:
    """Tests for compile_addressed."""

    def test_addressed_forms_match(self, identity: BotIdentity):
        """Test the accepted addressing forms."""
        compiled = compile_addressed(re.compile("ping"), identity)

        assert compiled.search("@hedwig, ping")
        assert compiled.search("hedwig: ping")
        assert compiled.search("hedwig ping")
        assert compiled.search("   hedwig,ping")

    def test_unaddressed_does_not_match(self, identity: BotIdentity):
        """Test that a bare message does not match the addressed form."""
        declared = re.compile("ping")
        compiled = compile_addressed(declared, identity)

        assert compiled.search("ping") is None
        assert compiled.search("hey hedwig ping") is None
        # The declared pattern itself would still match ambiently
        assert declared.search("ping")

    def test_alias_binds_longest_name(self, alias_identity: BotIdentity):
        """Test that "hal9000" is not truncated to "hal"."""
        compiled = compile_addressed(re.compile(r"(?P<rest>.+)"), alias_identity)

        match = compiled.search("hal9000: status")
        assert match is not None
        assert match.group("rest") == "status"

    def test_either_name_addresses(self, alias_identity: BotIdentity):
        compiled = compile_addressed(re.compile("status$"), alias_identity)

        assert compiled.search("hal status")
        assert compiled.search("@hal9000, status")
        assert compiled.search("status") is None

    def test_does_not_mutate_declared(self, identity: BotIdentity):
        """Test that rewriting returns a new pattern."""
        declared = re.compile("ping")
        compiled = compile_addressed(declared, identity)

        assert compiled is not declared
        assert declared.pattern == "ping"

    def test_preserves_ignorecase(self, identity: BotIdentity):
        compiled = compile_addressed(re.compile("ping", re.IGNORECASE), identity)

        assert compiled.flags & re.IGNORECASE
        assert compiled.search("HEDWIG PING")

    def test_preserves_case_sensitivity(self, identity: BotIdentity):
        compiled = compile_addressed(re.compile("ping"), identity)

        assert compiled.search("hedwig PING") is None

    def test_preserves_dotall(self, identity: BotIdentity):
        compiled = compile_addressed(re.compile("echo (.+)", re.DOTALL), identity)

        match = compiled.search("hedwig echo one\ntwo")
        assert match.group(1) == "one\ntwo"

    def test_leading_inline_flags(self, identity: BotIdentity):
        """Test that inline global flags survive being embedded."""
        compiled = compile_addressed(re.compile("(?i)ping"), identity)

        assert compiled.search("hedwig PING")

    def test_verbose_trailing_comment(self, identity: BotIdentity):
        declared = re.compile(r"ping \s+ (\d+)  # count", re.VERBOSE)
        compiled = compile_addressed(declared, identity)

        assert compiled.search("hedwig ping 3").group(1) == "3"

    def test_uncompilable_source(self, identity: BotIdentity):
        """Test that a source broken by embedding raises PatternError."""
        broken = SimpleNamespace(pattern="(unclosed", flags=0)

        with pytest.raises(PatternError) as exc_info:
            compile_addressed(broken, identity)
        assert exc_info.value.pattern == "(unclosed"
        assert isinstance(exc_info.value.__cause__, re.error)

    def test_bytes_pattern(self, identity: BotIdentity):
        with pytest.raises(PatternError) as exc_info:
            compile_addressed(re.compile(b"ping"), identity)
        assert exc_info.value.pattern == b"ping"

    def test_invalid_identity(self):
        with pytest.raises(ConfigurationError):
            compile_addressed(re.compile("ping"), BotIdentity(""))
