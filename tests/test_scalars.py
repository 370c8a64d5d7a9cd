import pytest

from tinyyaml.errors import UnsupportedEscapeError, UnsupportedFeatureError, YAMLSyntaxError
from tinyyaml.scalars import (
    CLIP,
    FOLDED,
    KEEP,
    LITERAL,
    STRIP,
    parse_block_header,
    resolve_block,
    resolve_double_quoted,
    resolve_plain,
    resolve_single_quoted,
)


def test_plain_scalars_are_trimmed_and_never_coerced():
    assert resolve_plain("  hello world  ") == "hello world"
    assert resolve_plain("true") == "true"
    assert resolve_plain("42") == "42"
    assert resolve_plain("~") is None


def test_single_quoted_only_unescapes_doubled_quotes():
    assert resolve_single_quoted("'it''s'") == "it's"
    assert resolve_single_quoted("'a\\nb'") == "a\\nb"
    assert resolve_single_quoted("''") == ""


def test_double_quoted_escapes():
    assert resolve_double_quoted(r'"a\tb\n\"q\" \\ \x41\0"') == 'a\tb\n"q" \\ A\x00'
    assert resolve_double_quoted(r'"\a\b\f\r\v\e\ \/"') == "\x07\x08\x0c\r\x0b\x1b /"


@pytest.mark.parametrize("text", [r'"\u00e9"', r'"\U0001F600"'])
def test_unicode_escapes_are_rejected(text):
    with pytest.raises(UnsupportedEscapeError):
        resolve_double_quoted(text)


@pytest.mark.parametrize("text", [r'"\q"', r'"\xZZ"', r'"\x4"'])
def test_malformed_escapes_are_syntax_errors(text):
    with pytest.raises(YAMLSyntaxError):
        resolve_double_quoted(text)


def test_unterminated_quotes_are_multi_line_scalars():
    with pytest.raises(UnsupportedFeatureError):
        resolve_single_quoted("'starts here")

    with pytest.raises(UnsupportedFeatureError):
        resolve_double_quoted('"starts here')


def test_text_after_closing_quote_is_rejected():
    with pytest.raises(YAMLSyntaxError):
        resolve_single_quoted("'a' b")


@pytest.mark.parametrize(
    "header, expected",
    [("|", (LITERAL, CLIP)), (">", (FOLDED, CLIP)), ("|-", (LITERAL, STRIP)), (">+", (FOLDED, KEEP))],
)
def test_block_headers(header, expected):
    assert parse_block_header(header) == expected


def test_block_header_errors():
    with pytest.raises(UnsupportedFeatureError):
        parse_block_header("|2")

    with pytest.raises(YAMLSyntaxError):
        parse_block_header("|x")


@pytest.mark.parametrize(
    "chomping, expected",
    [(CLIP, "text\n"), (STRIP, "text"), (KEEP, "text\n\n\n")],
)
def test_literal_chomping_with_trailing_blank_lines(chomping, expected):
    assert resolve_block(["text", "", ""], LITERAL, chomping) == expected


def test_literal_keeps_line_breaks_and_extra_indentation():
    assert resolve_block(["a", "  b", "", "c"], LITERAL) == "a\n  b\n\nc\n"


def test_folded_joins_lines_and_keeps_blank_lines_as_breaks():
    assert resolve_block(["one", "two", "", "three"], FOLDED) == "one two\nthree\n"
    assert resolve_block(["one", "", "", "two"], FOLDED, STRIP) == "one\n\ntwo"


def test_folded_leaves_more_indented_lines_alone():
    assert resolve_block(["a", "  b", "c"], FOLDED) == "a\n  b\nc\n"


def test_empty_blocks():
    assert resolve_block([], LITERAL) == ""
    assert resolve_block(["", ""], LITERAL, KEEP) == "\n\n"
    assert resolve_block(["", ""], FOLDED, STRIP) == ""
