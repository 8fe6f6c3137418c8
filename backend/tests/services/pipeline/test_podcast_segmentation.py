"""
Tests for script segmentation and preview
"""

import pytest

from castengine.services.pipeline import make_preview, split_script_segments


class TestSplitScriptSegments:

    def test_paragraphs_are_preferred(self):
        """Test blank lines split the script first"""
        script = "Intro line\nstill intro\n\nSecond part\n\n\n  Third  "

        assert split_script_segments(script) == ["Intro line\nstill intro", "Second part", "Third"]

    def test_single_paragraph_falls_back_to_lines(self):
        """Test single newlines split when there are no paragraphs"""
        assert split_script_segments("One\nTwo\n\n") == ["One", "Two"]

    def test_single_line(self):
        """Test a one-line script stays whole"""
        assert split_script_segments("  Just this.  ") == ["Just this."]

    @pytest.mark.parametrize("script", ["", "   ", "\n\n\n"])
    def test_blank_script_is_one_empty_segment(self, script):
        """Test a blank script"""
        assert split_script_segments(script) == [""]

    def test_segments_are_trimmed_and_non_empty(self):
        """Test whitespace is trimmed and empty pieces dropped"""
        segments = split_script_segments("  a \n\n \n\n b  \n\n")

        assert segments == ["a", "b"]
        assert all(s == s.strip() and s for s in segments)


class TestMakePreview:

    def test_short_script_is_unchanged(self):
        """Test a short script is kept as is"""
        assert make_preview("Hello") == "Hello"

    def test_exactly_limit_is_not_truncated(self):
        """Test the limit itself is not truncated"""
        script = "x" * 200
        assert make_preview(script) == script

    def test_long_script_is_truncated_with_ellipsis(self):
        """Test long scripts are cut and marked"""
        preview = make_preview("y" * 250)

        assert len(preview) == 201
        assert preview.endswith("…")
        assert preview[:200] == "y" * 200

    def test_custom_limit(self):
        """Test a caller-supplied limit"""
        assert make_preview("abcdef", limit=3) == "abc…"
