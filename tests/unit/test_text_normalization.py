"""Unit tests for answer normalization."""

import pytest

from deutschmeister.utils.text_normalization import (
    answers_match,
    normalize_answer,
    normalize_punctuation,
    reorder_matches,
)


class TestNormalizeAnswer:
    """Test normalize_answer."""

    def test_spacing_around_punctuation(self):
        """Test the documented example."""
        assert normalize_answer("Ich  komme , jetzt !") == "ich komme, jetzt!"

    def test_lowercases_and_trims(self):
        assert normalize_answer("  Guten Tag  ") == "guten tag"

    def test_inserts_space_after_punctuation(self):
        assert normalize_answer("Ja,bitte.Danke") == "ja, bitte. danke"

    def test_collapses_tabs_and_newlines(self):
        assert normalize_answer("Ich\t bin\n\nhier") == "ich bin hier"

    def test_empty_string(self):
        assert normalize_answer("") == ""
        assert normalize_answer("   ") == ""

    @pytest.mark.parametrize(
        "text",
        [
            "Ich  komme , jetzt !",
            "Wie geht's ? Gut ; danke :",
            "Hallo,,Welt!!",
            " . , ! ",
            "Straße   und  Größe",
        ],
    )
    def test_idempotent(self, text):
        """Test normalizing twice gives the same result as once."""
        once = normalize_answer(text)
        assert normalize_answer(once) == once


class TestNormalizePunctuation:
    """Test the case-preserving variant used by content checks."""

    def test_removes_space_around_punctuation(self):
        assert normalize_punctuation("Ich komme .") == "Ich komme."
        assert normalize_punctuation("Ja , bitte") == "Ja,bitte"

    def test_preserves_case(self):
        assert normalize_punctuation("Guten  Tag") == "Guten Tag"

    def test_reorder_join_equals_answer(self):
        """Test words joined with spaces match the canonical answer."""
        joined = normalize_punctuation(" ".join(["Ich", "komme", "."]))
        assert joined == normalize_punctuation("Ich komme.")


class TestMatching:
    """Test answers_match and reorder_matches."""

    def test_answers_match_ignores_case_and_spacing(self):
        assert answers_match("ich komme ,jetzt!", "Ich komme, jetzt!")

    def test_answers_match_detects_different_words(self):
        assert not answers_match("Ich gehe.", "Ich komme.")

    def test_reorder_matches(self):
        assert reorder_matches(["Ich", "komme", "."], "Ich komme.")
        assert not reorder_matches(["komme", "Ich", "."], "Ich komme.")
