"""Resolve raw scalar tokens into their final values.

Five styles are understood: plain, single-quoted, double-quoted, literal block
(``|``) and folded block (``>``). Scalars are never coerced into numbers or
booleans; the only non-string result is ``None`` for the plain token ``~``.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .errors import UnsupportedEscapeError, UnsupportedFeatureError, YAMLSyntaxError
from .lines import closing_quote

LITERAL = "|"
FOLDED = ">"

CLIP = ""
STRIP = "-"
KEEP = "+"

_BLOCK_HEADER = re.compile(r"^([|>])([+-]?)$")
_INDENTED_HEADER = re.compile(r"^[|>](?:[+-]?[1-9]|[1-9][+-])$")
_HEX = re.compile(r"^[0-9A-Fa-f]{2}$")

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    '"': '"',
    "\\": "\\",
    "0": "\x00",
    "a": "\x07",
    "b": "\x08",
    "f": "\x0c",
    "r": "\r",
    "v": "\x0b",
    "e": "\x1b",
    " ": " ",
    "/": "/",
}


def resolve_plain(text: str) -> Optional[str]:
    text = text.strip()
    if text == "~":
        return None
    return text


def _quoted_body(text: str) -> str:
    end = closing_quote(text, 0)
    if end < 0:
        raise UnsupportedFeatureError("multi-line quoted scalars are not supported")
    if text[end + 1:].strip():
        raise YAMLSyntaxError("unexpected text after quoted scalar")
    return text[1:end]


def resolve_single_quoted(text: str) -> str:
    """Strip the quotes; ``''`` is the only escape."""

    return _quoted_body(text).replace("''", "'")


def resolve_double_quoted(text: str) -> str:
    """Strip the quotes and process backslash escapes.

    Only the 8-bit escape forms are understood. ``\\u`` and ``\\U`` escapes are
    rejected with :class:`UnsupportedEscapeError` rather than decoded.
    """

    body = _quoted_body(text)
    chunks: List[str] = []
    index = 0
    while index < len(body):
        char = body[index]
        if char != "\\":
            chunks.append(char)
            index += 1
            continue

        code = body[index + 1:index + 2]
        if code in _ESCAPES and code:
            chunks.append(_ESCAPES[code])
            index += 2
        elif code == "x":
            digits = body[index + 2:index + 4]
            if not _HEX.match(digits):
                raise YAMLSyntaxError(f"invalid escape \\x{digits}")
            chunks.append(chr(int(digits, 16)))
            index += 4
        elif code in ("u", "U"):
            raise UnsupportedEscapeError(f"unicode escape \\{code} is not supported")
        else:
            raise YAMLSyntaxError(f"unknown escape sequence \\{code}")

    return "".join(chunks)


def parse_block_header(text: str) -> Tuple[str, str]:
    """Return ``(style, chomping)`` for a block scalar indicator like ``|-``."""

    match = _BLOCK_HEADER.match(text)
    if match is not None:
        return match.group(1), match.group(2)
    if _INDENTED_HEADER.match(text):
        raise UnsupportedFeatureError("explicit indentation indicators are not supported")
    raise YAMLSyntaxError(f"malformed block scalar header {text!r}")


def _more_indented(line: str) -> bool:
    return line[:1] in (" ", "\t")


def _fold(lines: List[str]) -> str:
    parts: List[str] = []
    previous: Optional[str] = None
    seen_text = False
    for line in lines:
        if not line:
            parts.append("\n")
        elif previous is None:
            parts.append(line)
        elif not previous:
            # the break before a run of blank lines is folded away
            if seen_text and _more_indented(line):
                parts.append("\n")
            parts.append(line)
        elif _more_indented(previous) or _more_indented(line):
            parts.append("\n" + line)
        else:
            parts.append(" " + line)
        seen_text = seen_text or bool(line)
        previous = line
    return "".join(parts)


def resolve_block(lines: List[str], style: str, chomping: str = CLIP) -> str:
    """Join captured block lines and apply the chomping policy.

    ``lines`` are already stripped of the block's indentation; blank lines are
    empty strings.
    """

    end = len(lines)
    while end > 0 and not lines[end - 1].strip(" "):
        end -= 1
    content, trailing = lines[:end], lines[end:]

    if not content:
        return "\n" * len(trailing) if chomping == KEEP else ""

    text = "\n".join(content) if style == LITERAL else _fold(content)

    if chomping == STRIP:
        return text
    if chomping == KEEP:
        return text + "\n" * (len(trailing) + 1)
    return text + "\n"
