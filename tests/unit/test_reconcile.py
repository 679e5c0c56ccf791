#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the content reconciler."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from block2html.exceptions import ValidationError
from block2html.reconcile import extract_inner_content, is_wrapped, merge_class_values, reconcile

# Inner text that cannot form markup of its own
inner_text = st.text(alphabet=st.characters(blacklist_characters="<>&", blacklist_categories=["Cs"]), max_size=40)
class_names = st.lists(st.from_regex(r"[a-z][a-z0-9-]{0,8}", fullmatch=True), min_size=1, max_size=4).map(" ".join)


@pytest.mark.unit
class TestMergeClassValues:
    """Tests for class merging."""

    def test_appends_without_dedupe(self):
        """Test classes are appended as they are."""
        assert merge_class_values("a b", "b c") == "a b b c"

    def test_dedupe(self):
        """Test dedupe drops tokens already present."""
        assert merge_class_values("a b", "b c", dedupe=True) == "a b c"

    def test_empty_sides(self):
        """Test an empty side returns the other."""
        assert merge_class_values("", "c") == "c"
        assert merge_class_values("a", "  ") == "a"


@pytest.mark.unit
class TestReconcileModes:
    """Tests for each content mode."""

    def test_blended_merges_classes(self):
        """Test blended mode appends new classes to the existing ones."""
        assert reconcile('<p class="a">Hi</p>', "p", {"class": "c"}, "blended") == '<p class="a c">Hi</p>'

    def test_raw_replaces_wrapper(self):
        """Test raw mode rebuilds the wrapper with only the new attributes."""
        assert reconcile('<p class="a" id="x">Hi</p>', "p", {"class": "c"}, "raw") == '<p class="c">Hi</p>'

    def test_trust_rendered_is_identity(self):
        """Test trust-rendered returns the input unchanged."""
        markup = '  <p class="a">Hi</p>\n'

        assert reconcile(markup, "p", {"class": "c"}, "trust-rendered") == markup

    def test_deprecated_mode_alias(self):
        """Test deprecated aliases select the same behavior."""
        assert reconcile('<p class="a">Hi</p>', "p", {"class": "c"}, "hybrid") == '<p class="a c">Hi</p>'

    def test_unknown_mode(self):
        """Test an unknown mode raises ValidationError."""
        with pytest.raises(ValidationError):
            reconcile("<p>x</p>", "p", {}, "fancy")

    def test_unwrapped_input_is_wrapped(self):
        """Test content without the expected wrapper becomes the child of a fresh element."""
        assert reconcile("Hello <b>you</b>", "p", {"class": "c"}, "raw") == '<p class="c">Hello <b>you</b></p>'
        assert reconcile("<div>x</div>", "p", {"class": "c"}, "blended") == '<p class="c"><div>x</div></p>'

    def test_tag_match_is_case_insensitive(self):
        """Test an upper-case wrapper is recognized."""
        assert reconcile("<P>Hi</P>", "p", {"class": "c"}, "raw") == '<p class="c">Hi</p>'

    def test_surrounding_whitespace_is_trimmed(self):
        """Test leading and trailing whitespace is dropped."""
        assert reconcile("\n  <p>Hi</p>\n", "p", {"class": "c"}, "raw") == '<p class="c">Hi</p>'

    def test_empty_class_never_emitted(self):
        """Test an empty class value adds no attribute."""
        assert reconcile("<p>Hi</p>", "p", {"class": ""}, "raw") == "<p>Hi</p>"
        assert reconcile("<p>Hi</p>", "p", {"class": ""}, "blended") == "<p>Hi</p>"

    def test_malformed_markup_does_not_raise(self):
        """Test unclosed markup is treated as unwrapped."""
        assert reconcile("<p>Hi", "p", {"class": "c"}, "blended") == '<p class="c"><p>Hi</p>'


@pytest.mark.unit
class TestBlendedPatching:
    """Tests for blended start-tag patching."""

    def test_attributes_injected_and_overwritten(self):
        """Test missing attributes are injected and present ones overwritten."""
        result = reconcile('<p id="old" class="a">Hi</p>', "p", {"class": "c", "id": "new", "title": "t"}, "blended")

        assert result == '<p id="new" class="a c" title="t">Hi</p>'

    def test_self_closing_wrapper(self):
        """Test injection happens before the self-closing slash."""
        assert reconcile('<hr class="a" />', "hr", {"class": "b", "role": "none"}, "blended") == (
            '<hr class="a b" role="none" />'
        )

    def test_unquoted_value_ending_in_slash(self):
        """Test a slash that ends an unquoted value stays part of the value."""
        assert reconcile("<img src=a/>", "img", {"class": "c"}, "blended") == '<img src=a/ class="c">'

    def test_class_injected_when_missing(self):
        """Test a class attribute is added when the wrapper has none."""
        assert reconcile("<p>Hi</p>", "p", {"class": "c"}, "blended") == '<p class="c">Hi</p>'

    def test_false_and_none_are_skipped(self):
        """Test False and None values leave the wrapper untouched."""
        assert reconcile('<p hidden>Hi</p>', "p", {"hidden": False, "id": None}, "blended") == "<p hidden>Hi</p>"

    def test_inner_markup_untouched(self):
        """Test nested elements of the same tag are not patched."""
        markup = '<div class="outer"><div class="inner">x</div></div>'

        assert reconcile(markup, "div", {"class": "c"}, "blended") == (
            '<div class="outer c"><div class="inner">x</div></div>'
        )

    def test_sibling_run_patched(self):
        """Test each wrapper of a sibling run is patched."""
        result = reconcile('<p class="a">one</p>\n<p>two</p>', "p", {"class": "c"}, "blended")

        assert result == '<p class="a c">one</p>\n<p class="c">two</p>'

    def test_sibling_run_rebuilt_in_raw_mode(self):
        """Test each wrapper of a sibling run is rebuilt, separators kept."""
        result = reconcile('<p class="a">one</p>\n<p>two</p>', "p", {"class": "c"}, "raw")

        assert result == '<p class="c">one</p>\n<p class="c">two</p>'

    def test_repeated_merge_duplicates_without_dedupe(self):
        """Test repeated blending repeats classes by default."""
        once = reconcile('<p class="a">Hi</p>', "p", {"class": "a c"}, "blended")

        assert once == '<p class="a a c">Hi</p>'

    def test_repeated_merge_with_dedupe_is_stable(self):
        """Test blending twice with dedupe gives the same result as once."""
        once = reconcile('<p class="a">Hi</p>', "p", {"class": "a c"}, "blended", dedupe_classes=True)
        twice = reconcile(once, "p", {"class": "a c"}, "blended", dedupe_classes=True)

        assert once == twice == '<p class="a c">Hi</p>'


@pytest.mark.unit
class TestHelpers:
    """Tests for wrapper helpers."""

    def test_is_wrapped(self):
        """Test wrapper detection on trimmed markup."""
        assert is_wrapped("  <h2>t</h2> ", "h2")
        assert not is_wrapped("<h2>t</h2>", "h3")

    def test_extract_inner_content(self):
        """Test inner content extraction for single wrappers and runs."""
        assert extract_inner_content('<p class="x">a<b>b</b></p>', "p") == "a<b>b</b>"
        assert extract_inner_content("<p>a</p><p>b</p>", "p") == "ab"
        assert extract_inner_content("plain", "p") == "plain"


@pytest.mark.unit
@pytest.mark.property
class TestReconcileLaws:
    """Property-based tests for reconciler laws."""

    @given(st.text(max_size=80), class_names)
    def test_trust_rendered_identity(self, markup, classes):
        """Property: trust-rendered mode returns any input unchanged."""
        assert reconcile(markup, "p", {"class": classes}, "trust-rendered") == markup

    @given(inner_text, class_names, class_names)
    def test_raw_rebuilds_single_wrapper(self, content, old_classes, new_classes):
        """Property: raw mode keeps the inner content and only the new attributes."""
        markup = f'<p class="{old_classes}">{content}</p>'

        assert reconcile(markup, "p", {"class": new_classes}, "raw") == f'<p class="{new_classes}">{content}</p>'

    @given(inner_text, class_names, class_names)
    def test_blended_keeps_existing_classes_first(self, content, old_classes, new_classes):
        """Property: blended mode keeps existing classes, then appends the new ones."""
        markup = f'<p class="{old_classes}">{content}</p>'

        assert reconcile(markup, "p", {"class": new_classes}, "blended") == (
            f'<p class="{old_classes} {new_classes}">{content}</p>'
        )

    @given(inner_text, class_names, class_names)
    def test_blended_dedupe_idempotent(self, content, old_classes, new_classes):
        """Property: with dedupe, blending twice equals blending once."""
        markup = f'<p class="{old_classes}">{content}</p>'
        once = reconcile(markup, "p", {"class": new_classes}, "blended", dedupe_classes=True)

        assert reconcile(once, "p", {"class": new_classes}, "blended", dedupe_classes=True) == once
