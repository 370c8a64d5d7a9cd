import pytest

from tinyyaml import load, parse_stream
from tinyyaml.errors import (
    ParseError,
    UnsupportedEscapeError,
    UnsupportedFeatureError,
    YAMLSyntaxError,
)


def test_parses_nested_mapping():
    text = """---
rootproperty: blah
section:
  one: two
  three: four
  Foo: Bar
  empty: ~
"""

    stream = parse_stream(text)

    assert len(stream) == 1
    assert stream[0].value == {
        "rootproperty": "blah",
        "section": {"one": "two", "three": "four", "Foo": "Bar", "empty": None},
    }


def test_mapping_preserves_key_order():
    value = load("b: 1\na: 2\nc: 3\n")[0]

    assert list(value) == ["b", "a", "c"]


def test_scalars_stay_strings():
    assert load("- 42\n- true\n- 1.5\n- null\n- ''\n- ~\n") == [
        ["42", "true", "1.5", "null", "", None]
    ]


def test_sequence_of_mappings():
    text = """- name: a
  value: b
- name: c
"""

    assert load(text) == [[{"name": "a", "value": "b"}, {"name": "c"}]]


def test_nested_sequences_on_one_line():
    assert load("- - a\n  - b\n- c\n") == [[["a", "b"], "c"]]


def test_sequence_may_sit_at_the_same_depth_as_its_key():
    text = """items:
- a
- b: c
  d: e
next: f
"""

    assert load(text) == [{"items": ["a", {"b": "c", "d": "e"}], "next": "f"}]


def test_entries_without_values_are_null():
    assert load("a:\nb: ~\n") == [{"a": None, "b": None}]
    assert load("-\n- \n") == [[None, None]]


def test_empty_collections():
    assert load("a: {}\nb: []\n") == [{"a": {}, "b": []}]


def test_empty_stream_has_no_documents():
    assert load("") == []
    assert load("# nothing here\n") == []


def test_bare_boundary_is_a_null_document():
    assert load("---\n") == [None]


def test_inline_document_values():
    assert load("--- {}\n--- []\n--- ~\n--- plain text\n--- 'quoted'\n") == [
        {},
        [],
        None,
        "plain text",
        "quoted",
    ]


def test_documents_keep_their_order_and_versions():
    stream = parse_stream("%YAML 1.1\n---\na: b\n---\n- c\n")

    assert stream.values() == [{"a": "b"}, ["c"]]
    assert [document.version for document in stream] == ["1.1", None]


def test_comments_and_blank_lines_are_ignored():
    text = """# leading comment
a: b # trailing

  # indented comment
c: 'd # not a comment'
url: http://example.com/page#anchor
"""

    assert load(text) == [{"a": "b", "c": "d # not a comment", "url": "http://example.com/page#anchor"}]


def test_quoted_values():
    assert load("a: 'it''s'\nb: \"tab\\there\"\nc: plain's\n") == [
        {"a": "it's", "b": "tab\there", "c": "plain's"}
    ]


@pytest.mark.parametrize(
    "header, expected",
    [("|", "text\n"), ("|-", "text"), ("|+", "text\n\n\n")],
)
def test_block_scalar_chomping(header, expected):
    text = f"value: {header}\n  text\n\n\nnext: x\n"

    assert load(text) == [{"value": expected, "next": "x"}]


def test_block_scalar_inside_sequence_entry():
    text = """steps:
  - run: |
      echo one
      # not a comment

      echo two
    name: build
"""

    assert load(text) == [
        {"steps": [{"run": "echo one\n# not a comment\n\necho two\n", "name": "build"}]}
    ]


def test_folded_scalar():
    text = """summary: >
  first line
  continues here

  second paragraph
"""

    assert load(text) == [{"summary": "first line continues here\nsecond paragraph\n"}]


def test_block_scalar_as_document_value():
    assert load("--- |\n  line one\n  line two\n") == ["line one\nline two\n"]
    assert load("--- >\nfolded\ntext\n") == ["folded text\n"]


def test_windows_line_endings():
    assert load("a: b\r\nc:\r\n  - d\r\n") == [{"a": "b", "c": ["d"]}]


@pytest.mark.parametrize(
    "text, line",
    [
        ("a: b\n  c: d\n", 2),
        ("a:\n    b: c\n  d: e\n", 3),
        ("a: b\na: c\n", 2),
        ("- a\nb: c\n", 2),
        ("a: b\n- c\n", 2),
        ("a: b: c\n", 1),
        ("a:\n\tb: c\n", 2),
        ("a: |\n    one\n  two\n", 3),
        ("a: |x\n  b\n", 1),
        ("--- a: b\n", 1),
        ("--- - a\n", 1),
        ("foo\n- a\n", 2),
        ("a: @b\n", 1),
        ("a: \"\\q\"\n", 1),
    ],
)
def test_syntax_errors_report_the_offending_line(text, line):
    with pytest.raises(YAMLSyntaxError) as excinfo:
        parse_stream(text)

    assert excinfo.value.line == line


def test_error_message_includes_position():
    with pytest.raises(YAMLSyntaxError) as excinfo:
        parse_stream("a: b\na: c\n")

    assert str(excinfo.value) == "duplicate mapping key 'a' at line 2: 'a: c'"


@pytest.mark.parametrize(
    "text",
    [
        "a: [1, 2]\n",
        "a: {b: c}\n",
        "a: &anchor b\n",
        "a: *anchor\n",
        "a: !tag b\n",
        "? complex key\n: value\n",
        "'quoted': key\n",
        "a: 'spans\n  lines'\n",
        "key: value\n  continued\n",
        "a: |2\n  text\n",
        "%TAG ! tag:example.com,2000:\n---\na: b\n",
    ],
)
def test_unsupported_features(text):
    with pytest.raises(UnsupportedFeatureError):
        parse_stream(text)


def test_unicode_escape_is_rejected_with_position():
    with pytest.raises(UnsupportedEscapeError) as excinfo:
        parse_stream('a: b\nc: "\\u00e9"\n')

    assert excinfo.value.line == 2
    assert isinstance(excinfo.value, ParseError)


def test_deep_nesting_does_not_recurse():
    depth = 2000
    text = "".join(f"{' ' * (2 * level)}k{level}:\n" for level in range(depth))

    node = load(text)[0]
    for level in range(depth - 1):
        node = node[f"k{level}"]

    assert node == {f"k{depth - 1}": None}


def test_value_on_its_own_deeper_line():
    assert load("key:\n  value\nother:\n  - x\n") == [{"key": "value", "other": ["x"]}]


def test_boundaries_without_content_are_null_documents():
    assert load("---\n---\n") == [None, None]


def test_comment_left_of_block_content_ends_the_block():
    assert load("a: |\n    x\n  # c\nb: y\n") == [{"a": "x\n", "b": "y"}]
    assert load("--- |\n  x\n# c\n") == ["x\n"]


def test_blank_lines_before_closing_comment_are_kept_for_chomping():
    text = "a:\n  b: |+\n      x\n\n    # c\n  d: y\n"

    assert load(text) == [{"a": {"b": "x\n\n", "d": "y"}}]


def test_tab_after_dash_starts_a_sequence_entry():
    assert load("-\tvalue\n- other\n") == [["value", "other"]]
    assert load("key:\tvalue\n") == [{"key": "value"}]
