"""Tests for ignore-list parsing and revision handles."""

import pytest

from ignore_committer.models import (
    IgnoreList,
    Policy,
    RevisionKind,
    RevisionRef,
    TraceLevel,
    TraceLine,
    Verdict,
)


class TestIgnoreList:
    """Tests for IgnoreList normalization and membership."""

    def test_entries_are_trimmed_and_lowercased(self):
        """Entries are stored trimmed and lower-cased."""
        ignored = IgnoreList.parse(" Foo@Bar.com , BOT@example.com")

        assert ignored.entries == ("foo@bar.com", "bot@example.com")

    @pytest.mark.parametrize("email", ["foo@bar.com", " Foo@Bar.com ", "FOO@BAR.COM"])
    def test_membership_ignores_case_and_whitespace(self, email):
        """Membership does not depend on case or surrounding whitespace."""
        ignored = IgnoreList.parse(" Foo@Bar.com ")

        assert ignored.contains(email)
        assert email in ignored

    def test_non_member(self):
        """Emails not in the list are not ignored."""
        ignored = IgnoreList.parse("foo@bar.com")

        assert not ignored.contains("other@bar.com")

    def test_duplicates_are_harmless(self):
        """Repeated entries do not change membership."""
        ignored = IgnoreList.parse("a@x.com,A@X.com")

        assert ignored.contains("a@x.com")
        assert not ignored.contains("b@x.com")

    def test_empty_configuration_has_no_entries(self):
        """An empty string ignores nobody, not even an empty email."""
        ignored = IgnoreList.parse("")

        assert ignored.entries == ()
        assert not ignored.contains("dev@example.com")
        assert not ignored.contains("")

    def test_trailing_comma_adds_no_entry(self):
        """A trailing comma does not create a blank entry."""
        ignored = IgnoreList.parse("a@x.com,")

        assert ignored.entries == ("a@x.com",)
        assert not ignored.contains("")
        assert not ignored.contains("   ")

    def test_blank_entries_between_commas_are_dropped(self):
        """Blank entries in the middle of the list are dropped too."""
        assert IgnoreList.parse("a@x.com, ,,b@x.com").entries == ("a@x.com", "b@x.com")

    def test_none_configuration_is_empty(self):
        """None parses like an empty string."""
        assert IgnoreList.parse(None) == IgnoreList.parse("")

    def test_str_lists_normalized_entries(self):
        """String form lists the normalized entries."""
        assert str(IgnoreList.parse("A@x.com, b@x.com")) == "[a@x.com, b@x.com]"
        assert str(IgnoreList.parse("")) == "[]"


class TestPolicy:
    """Tests for Policy."""

    def test_defaults(self):
        """Policy defaults to an empty list and both flags off."""
        policy = Policy()

        assert policy.ignored_authors == ""
        assert policy.allow_build_if_not_excluded_author is False
        assert policy.check_only_head is False

    def test_ignore_list_is_built_from_source_string(self):
        """ignore_list() parses the configured string."""
        policy = Policy(ignored_authors="Bot@example.com")

        assert policy.ignore_list().contains("bot@example.com")

    def test_policy_is_immutable(self):
        """Policy fields cannot be reassigned."""
        policy = Policy()

        with pytest.raises(AttributeError):
            policy.check_only_head = True


class TestRevisionRef:
    """Tests for RevisionRef tagging."""

    def test_parse_full_hash_is_native(self):
        """A 40 character hex string becomes a lower-cased native revision."""
        ref = RevisionRef.parse("ABCDEF" + "0" * 34)

        assert ref.kind is RevisionKind.NATIVE
        assert ref.value == "abcdef" + "0" * 34

    @pytest.mark.parametrize("text", ["abc1234", "main", "a" * 40 + "+merge"])
    def test_parse_other_forms_are_foreign(self, text):
        """Short hashes, ref names and decorated ids are foreign."""
        ref = RevisionRef.parse(text)

        assert ref.kind is RevisionKind.FOREIGN
        assert str(ref) == text

    def test_is_native(self):
        """is_native reflects the tag, not the value."""
        assert RevisionRef.native("a" * 40).is_native
        assert not RevisionRef.foreign("a" * 40).is_native


class TestVerdict:
    """Tests for Verdict serialization."""

    def test_to_dict(self):
        """Verdict serializes its decision and trace."""
        verdict = Verdict(
            build_required=True,
            trace=[TraceLine(TraceLevel.ERROR, "Error retrieving SCMSourceOwner")],
        )

        assert verdict.has_errors
        assert verdict.to_dict() == {
            "build_required": True,
            "trace": [{"level": "error", "message": "Error retrieving SCMSourceOwner"}],
        }

    def test_error_lines_render_with_marker(self):
        """Error lines render with an ERROR prefix, info lines as-is."""
        assert TraceLine(TraceLevel.ERROR, "boom").render() == "ERROR: boom"
        assert TraceLine(TraceLevel.INFO, "fine").render() == "fine"
