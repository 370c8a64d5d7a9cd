"""Turn raw text into classified logical lines.

Each physical line becomes a :class:`Line` that knows its indentation, what
kind of line it is and its payload with any trailing comment removed. The raw
text is kept as well because block scalars capture comment-looking lines
verbatim.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import List, Optional

from .errors import UnsupportedFeatureError, YAMLSyntaxError

_BOUNDARY = re.compile(r"^---(?:[ \t]+(.*))?$")
_END = re.compile(r"^\.\.\.(?:[ \t]+#.*)?[ \t]*$")
_DIRECTIVE = re.compile(r"^%[ ]?YAML(?:[ \t]*:[ \t]*|[ \t]+)(\S+)[ \t]*(?:#.*)?$")
_LEGACY_HEADER = re.compile(r"^%YAML[: ]?(\S+)$")
_VERSION = re.compile(r"^(\d+)\.(\d+)$")


class LineKind(enum.Enum):
    BLANK = "blank"
    COMMENT = "comment"
    DIRECTIVE = "directive"
    BOUNDARY = "boundary"
    END = "end"
    CONTENT = "content"


@dataclass
class Line:
    number: int
    indent: int
    kind: LineKind
    raw: str
    payload: str = ""
    version: Optional[str] = None

    @property
    def is_significant(self) -> bool:
        return self.kind not in (LineKind.BLANK, LineKind.COMMENT)


def closing_quote(text: str, start: int) -> int:
    """Return the index of the quote closing the scalar opened at ``start``."""

    quote = text[start]
    index = start + 1
    while index < len(text):
        char = text[index]
        if quote == '"' and char == "\\":
            index += 2
            continue
        if char == quote:
            if quote == "'" and text[index + 1:index + 2] == "'":
                index += 2
                continue
            return index
        index += 1
    return -1


def strip_comment(text: str) -> str:
    """Remove a trailing ``# comment`` that is not inside a quoted scalar.

    Quotes only open a scalar where a value can start: at the beginning of the
    text, after a sequence dash or after a mapping colon. An apostrophe in the
    middle of a plain scalar (``don't``) therefore never hides a comment.
    """

    at_value = True
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char in " \t":
            index += 1
            continue
        if at_value and char in "'\"":
            end = closing_quote(text, index)
            if end < 0:
                return text.rstrip()
            index = end + 1
            at_value = False
            continue
        if char == "#" and (index == 0 or text[index - 1] in " \t"):
            return text[:index].rstrip()
        separator = index + 1 == length or text[index + 1] in " \t"
        if separator and (char == ":" or (char == "-" and at_value)):
            at_value = True
        else:
            at_value = False
        index += 1
    return text.rstrip()


def check_version(version: str, number: int, raw: str) -> str:
    match = _VERSION.match(version)
    if match is None:
        raise YAMLSyntaxError(f"malformed %YAML version {version!r}", number, raw)
    if match.group(1) != "1":
        raise UnsupportedFeatureError(f"unsupported YAML version {version}", number, raw)
    return version


def classify_line(number: int, raw: str) -> Line:
    content = raw.lstrip(" \t")
    leading = len(raw) - len(content)

    if not content:
        return Line(number, len(raw) - len(raw.lstrip(" ")), LineKind.BLANK, raw)

    if "\t" in raw[:leading]:
        raise YAMLSyntaxError("tab characters are not valid indentation", number, raw)

    if content.startswith("#"):
        return Line(number, leading, LineKind.COMMENT, raw)

    if leading == 0:
        boundary = _BOUNDARY.match(raw)
        if boundary is not None:
            payload = strip_comment(boundary.group(1) or "")
            legacy = _LEGACY_HEADER.match(payload)
            if legacy is not None:
                version = check_version(legacy.group(1), number, raw)
                return Line(number, 0, LineKind.BOUNDARY, raw, version=version)
            return Line(number, 0, LineKind.BOUNDARY, raw, payload=payload)

        if _END.match(raw):
            return Line(number, 0, LineKind.END, raw)

        if raw.startswith("%"):
            directive = _DIRECTIVE.match(raw)
            if directive is None:
                raise UnsupportedFeatureError(
                    "only the %YAML version directive is supported", number, raw
                )
            version = check_version(directive.group(1), number, raw)
            return Line(number, 0, LineKind.DIRECTIVE, raw, version=version)

    return Line(number, leading, LineKind.CONTENT, raw, payload=strip_comment(content))


def classify_lines(text: str) -> List[Line]:
    """Split ``text`` on newlines and classify every line."""

    if text.startswith("\ufeff"):
        text = text[1:]

    pieces = text.split("\n")
    if pieces and pieces[-1] == "":
        pieces.pop()

    lines: List[Line] = []
    for number, raw in enumerate(pieces, start=1):
        if raw.endswith("\r"):
            raw = raw[:-1]
        lines.append(classify_line(number, raw))
    return lines
