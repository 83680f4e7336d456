"""Unit tests for the reasoning extraction module."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from reasonchat.reasoning import (
    MarkerPair,
    ReasoningFormat,
    TokenKind,
    parse_reasoning,
    split_embedded,
    tokenize,
)

# Text that cannot contain a delimiter
plain_text = st.text(alphabet=st.characters(exclude_characters="<>"))

# Delimiter-free text with surrounding whitespace kept in
padded_text = st.tuples(
    st.sampled_from(["", " ", "\n", " \t"]),
    plain_text,
    st.sampled_from(["", " ", "\n\n"]),
).map("".join)


class TestTokenize:
    """Tests for the delimiter tokenizer."""

    def test_tokens_reproduce_input(self):
        """Test that token texts concatenate back to the input."""
        text = "a<think>b</think>c<thinking>d"
        assert "".join(t.text for t in tokenize(text)) == text

    def test_longest_marker_wins(self):
        """Test that <thinking> is not read as <think>."""
        tokens = tokenize("<thinking>x</thinking>")

        assert [t.kind for t in tokens] == [TokenKind.OPEN, TokenKind.TEXT, TokenKind.CLOSE]
        assert tokens[0].text == "<thinking>"

    def test_no_markers(self):
        """Test text without delimiters becomes a single token."""
        tokens = tokenize("just an answer")
        assert len(tokens) == 1
        assert tokens[0].kind is TokenKind.TEXT

    def test_custom_markers(self):
        """Test tokenizing with a custom delimiter pair."""
        markers = (MarkerPair(start="[[", end="]]"),)
        kinds = [t.kind for t in tokenize("a[[b]]c", markers)]
        assert kinds == [TokenKind.TEXT, TokenKind.OPEN, TokenKind.TEXT, TokenKind.CLOSE, TokenKind.TEXT]


class TestSplitEmbedded:
    """Tests for splitting at the first balanced pair."""

    def test_simple_pair(self):
        assert split_embedded("<think>why</think>answer") == ("answer", "why")

    def test_text_on_both_sides(self):
        assert split_embedded("pre <think>x</think> post") == ("pre  post", "x")

    def test_nested_same_marker(self):
        """Test that nested delimiters of the same pair stay in the span."""
        outside, inside = split_embedded("<think>a<think>b</think>c</think>done")

        assert inside == "a<think>b</think>c"
        assert outside == "done"

    def test_only_first_pair_is_split(self):
        outside, inside = split_embedded("<think>one</think>mid<think>two</think>")

        assert inside == "one"
        assert outside == "mid<think>two</think>"

    def test_unclosed_is_malformed(self):
        assert split_embedded("<think>never closed") is None

    def test_stray_close_is_malformed(self):
        assert split_embedded("oops</think><think>x</think>") is None

    def test_mismatched_pair_is_malformed(self):
        assert split_embedded("<think>x</thinking>") is None


class TestParseReasoning:
    """Tests for parse_reasoning policy by format."""

    def test_parsed_splits_markers(self):
        """Test the basic <think> split."""
        reply = parse_reasoning("<think>step one</think>Final answer", None, ReasoningFormat.PARSED)

        assert reply.reasoning == "step one"
        assert reply.content == "Final answer"

    def test_parsed_keeps_interior_whitespace(self):
        """Test that only the answer is stripped, never the marked interior."""
        reply = parse_reasoning("<think> step one\n</think>\n\nFinal answer", None, "parsed")

        assert reply.reasoning == " step one\n"
        assert reply.content == "Final answer"

    def test_parsed_uses_distinct_field(self):
        """Test that a transport reasoning field is used verbatim."""
        reply = parse_reasoning("Final answer", "  field reasoning ", ReasoningFormat.PARSED)

        assert reply.reasoning == "  field reasoning "
        assert reply.content == "Final answer"

    def test_distinct_field_wins_over_markers(self):
        """Test that markers are ignored when a distinct field exists."""
        content = "<think>inline</think>Answer"
        reply = parse_reasoning(content, "from field", ReasoningFormat.PARSED)

        assert reply.reasoning == "from field"
        assert reply.content == content

    def test_parsed_without_markers_omits_reasoning(self):
        reply = parse_reasoning("No trace here", None, ReasoningFormat.PARSED)

        assert reply.reasoning is None
        assert reply.content == "No trace here"

    def test_parsed_empty_span(self):
        reply = parse_reasoning("<think></think>Answer", None, ReasoningFormat.PARSED)

        assert reply.reasoning == ""
        assert reply.content == "Answer"

    @pytest.mark.parametrize("content", [
        "<think>unbalanced answer",
        "answer</think>",
        "<think>a</thinking>b",
    ])
    def test_malformed_markers_pass_through(self, content: str):
        """Test that malformed delimiters fail open to the raw content."""
        reply = parse_reasoning(content, None, ReasoningFormat.PARSED)

        assert reply.content == content
        assert reply.reasoning is None

    def test_raw_keeps_markers_inline(self):
        content = "<think>step</think>Answer"
        reply = parse_reasoning(content, "field", ReasoningFormat.RAW)

        assert reply.content == content
        assert reply.reasoning is None

    def test_hidden_discards_distinct_field(self):
        reply = parse_reasoning("Answer", "secret steps", ReasoningFormat.HIDDEN)

        assert reply.reasoning is None
        assert reply.content == "Answer"

    def test_hidden_removes_marked_span(self):
        reply = parse_reasoning("<think>secret</think>Answer", None, ReasoningFormat.HIDDEN)

        assert reply.reasoning is None
        assert reply.content == "Answer"

    def test_invalid_format_raises(self):
        with pytest.raises(ValueError):
            parse_reasoning("x", None, "verbose")

    @given(st.text(), st.one_of(st.none(), st.text()))
    def test_hidden_never_has_reasoning(self, content: str, reasoning: str | None):
        """Property test: hidden format never yields reasoning."""
        assert parse_reasoning(content, reasoning, ReasoningFormat.HIDDEN).reasoning is None

    @given(st.text(), st.one_of(st.none(), st.text()))
    def test_raw_content_is_identical(self, content: str, reasoning: str | None):
        """Property test: raw format returns content unchanged."""
        reply = parse_reasoning(content, reasoning, ReasoningFormat.RAW)

        assert reply.content == content
        assert reply.reasoning is None

    @given(plain_text, padded_text, plain_text)
    def test_parsed_extracts_marked_span(self, before: str, inside: str, after: str):
        """Property test: a well-formed pair is split out of the content."""
        reply = parse_reasoning(f"{before}<think>{inside}</think>{after}", None, ReasoningFormat.PARSED)

        assert reply.reasoning == inside
        assert reply.content == (before + after).strip()
        assert "<think>" not in reply.content

    @given(st.text())
    def test_parsed_never_raises(self, content: str):
        """Property test: extraction is best-effort for any input."""
        parse_reasoning(content, None, ReasoningFormat.PARSED)
