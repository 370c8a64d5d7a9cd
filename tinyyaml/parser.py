"""Build value trees from classified document lines.

The parser walks a document line by line and keeps an explicit stack of
indentation frames. Each frame pairs an indentation depth with the container
being filled at that depth. Lines at the same depth add siblings, deeper lines
fill the pending entry of the frame on top, shallower lines close frames.

Nesting that starts on the same line (``- key: value`` or ``- - item``) is fed
back through the same loop as a virtual line at the column where the nested
entry begins, so the parser never recurses on input depth.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from .documents import DocumentSource, split_documents
from .errors import ParseError, UnsupportedFeatureError, YAMLSyntaxError
from .lines import Line, LineKind, classify_lines, closing_quote
from .logging_utils import get_logger
from .model import Node, Stream
from .scalars import (
    parse_block_header,
    resolve_block,
    resolve_double_quoted,
    resolve_plain,
    resolve_single_quoted,
)

logger = get_logger(__name__)


def is_sequence_entry(payload: str) -> bool:
    return payload == "-" or payload.startswith(("- ", "-\t"))


def _key_separator(payload: str) -> int:
    index = payload.find(":")
    while index >= 0:
        if index + 1 == len(payload) or payload[index + 1] in " \t":
            return index
        index = payload.find(":", index + 1)
    return -1


def split_mapping_entry(payload: str) -> Optional[Tuple[str, str]]:
    """Return ``(key, rest)`` when ``payload`` is a ``key: value`` entry."""

    if not payload:
        return None

    first = payload[0]
    if first in "'\"":
        end = closing_quote(payload, 0)
        if end >= 0:
            after = payload[end + 1:].lstrip(" ")
            if after == ":" or after.startswith(": "):
                raise UnsupportedFeatureError("quoted mapping keys are not supported")
        return None

    if first in "{[":
        return None

    index = _key_separator(payload)
    if index < 0:
        return None
    return payload[:index].rstrip(), payload[index + 1:].strip()


def _check_key(key: str) -> None:
    if not key:
        raise YAMLSyntaxError("empty mapping key")
    first = key[0]
    if first in "&*!":
        raise UnsupportedFeatureError("anchors, aliases and tags are not supported")
    if first == "?":
        raise UnsupportedFeatureError("explicit mapping keys are not supported")
    if first in "@`":
        raise YAMLSyntaxError(f"mapping keys cannot start with {first!r}")


class _Frame:
    __slots__ = ("depth", "node", "slot", "open", "compact")

    def __init__(self, depth: int, node: Any, compact: bool = False) -> None:
        self.depth = depth
        self.node = node
        # key or index of the entry most recently added to ``node``
        self.slot: Any = None
        # True while that entry still waits for a value on a deeper line
        self.open = False
        # a sequence written at the same depth as the key that owns it
        self.compact = compact

    def assign(self, value: Node) -> None:
        self.node[self.slot] = value


class BlockParser:
    """Parse the lines of one document into a single value."""

    def __init__(self, source: DocumentSource) -> None:
        self.source = source
        self._lines = source.lines
        self._position = 0
        self._line: Line | None = None
        self._root: List[Node] = [None]

        root = _Frame(-1, self._root)
        root.slot = 0
        root.open = True
        self._stack: List[_Frame] = [root]

    def parse(self) -> Node:
        try:
            if self.source.inline is not None:
                self._parse_inline(self.source.inline)

            while self._position < len(self._lines):
                line = self._lines[self._position]
                self._position += 1
                if line.kind is LineKind.CONTENT:
                    self._line = line
                    self._feed(line)
        except ParseError as exc:
            if self._line is not None:
                exc.locate(self._line.number, self._line.raw)
            raise

        return self._root[0]

    def _parse_inline(self, text: str) -> None:
        self._line = Line(self.source.start, 0, LineKind.BOUNDARY, f"--- {text}", text)
        if is_sequence_entry(text) or split_mapping_entry(text) is not None:
            raise YAMLSyntaxError("block collections cannot start on the document boundary line")
        root = self._stack[0]
        root.assign(self._value(text, root.depth))
        root.open = False

    def _feed(self, line: Line) -> None:
        depth, payload = line.indent, line.payload

        if payload == "?" or payload.startswith("? "):
            raise UnsupportedFeatureError("explicit mapping keys are not supported")

        popped = False
        while self._stack[-1].depth > depth:
            self._stack.pop()
            popped = True

        top = self._stack[-1]
        if top.compact and top.depth == depth and not is_sequence_entry(payload):
            self._stack.pop()
            top = self._stack[-1]

        if top.depth == depth:
            if top.open and isinstance(top.node, dict) and is_sequence_entry(payload):
                sequence: List[Node] = []
                top.assign(sequence)
                top.open = False
                top = _Frame(depth, sequence, compact=True)
                self._stack.append(top)
            top.open = False
            nested = self._entry(top, payload)
            if nested is not None:
                self._nest(*nested)
            return

        if popped:
            raise YAMLSyntaxError("indentation does not match any enclosing block")

        if not top.open:
            if is_sequence_entry(payload) or split_mapping_entry(payload) is not None:
                if top.depth < 0:
                    raise YAMLSyntaxError("unexpected content after the document value")
                raise YAMLSyntaxError("unexpected indentation")
            raise UnsupportedFeatureError("multi-line plain scalars are not supported")

        self._nest(depth, payload)

    def _nest(self, depth: int, payload: str) -> None:
        """Fill the open entry on top of the stack with a value starting at ``depth``."""

        nested: Optional[Tuple[int, str]] = (depth, payload)
        while nested is not None:
            depth, payload = nested
            parent = self._stack[-1]
            parent.open = False

            node: Node
            if is_sequence_entry(payload):
                node = []
            elif split_mapping_entry(payload) is not None:
                node = {}
            else:
                parent.assign(self._value(payload, parent.depth))
                return

            parent.assign(node)
            frame = _Frame(depth, node)
            self._stack.append(frame)
            nested = self._entry(frame, payload)

    def _entry(self, frame: _Frame, payload: str) -> Optional[Tuple[int, str]]:
        """Add one entry to ``frame``.

        Returns the column and text of a collection that starts on the same
        line, for the caller to open as a nested frame.
        """

        if is_sequence_entry(payload):
            if not isinstance(frame.node, list):
                raise YAMLSyntaxError("sequence entry found inside a mapping")
            rest = payload[1:].lstrip(" \t")
            frame.node.append(None)
            frame.slot = len(frame.node) - 1
            if not rest:
                frame.open = True
                return None
            if is_sequence_entry(rest) or split_mapping_entry(rest) is not None:
                frame.open = True
                return frame.depth + len(payload) - len(rest), rest
            frame.assign(self._value(rest, frame.depth))
            return None

        entry = split_mapping_entry(payload)
        if entry is None:
            raise YAMLSyntaxError("expected a sequence entry or a mapping entry")
        if not isinstance(frame.node, dict):
            raise YAMLSyntaxError("mapping entry found inside a sequence")

        key, rest = entry
        _check_key(key)
        if key in frame.node:
            raise YAMLSyntaxError(f"duplicate mapping key {key!r}")
        frame.node[key] = None
        frame.slot = key
        if not rest:
            frame.open = True
            return None
        if is_sequence_entry(rest) or split_mapping_entry(rest) is not None:
            raise YAMLSyntaxError("nested block collections must start on a new line")
        frame.assign(self._value(rest, frame.depth))
        return None

    def _value(self, text: str, owner_depth: int) -> Node:
        if text == "{}":
            return {}
        if text == "[]":
            return []

        first = text[0]
        if first in "{[":
            raise UnsupportedFeatureError("flow collections are not supported")
        if first in "&*!":
            raise UnsupportedFeatureError("anchors, aliases and tags are not supported")
        if first in "@`":
            raise YAMLSyntaxError(f"plain scalars cannot start with {first!r}")
        if first in "|>":
            style, chomping = parse_block_header(text)
            return resolve_block(self._capture(owner_depth), style, chomping)
        if first == "'":
            return resolve_single_quoted(text)
        if first == '"':
            return resolve_double_quoted(text)
        return resolve_plain(text)

    def _capture(self, owner_depth: int) -> List[str]:
        """Consume the lines of a block scalar, stripped of their indentation."""

        captured: List[Line] = []
        block_indent: Optional[int] = None
        while self._position < len(self._lines):
            line = self._lines[self._position]
            if line.kind is not LineKind.BLANK:
                if line.indent <= owner_depth:
                    break
                if block_indent is None:
                    block_indent = line.indent
                elif line.kind is LineKind.COMMENT and line.indent < block_indent:
                    # a comment left of the content ends the block
                    break
            captured.append(line)
            self._position += 1

        if block_indent is None:
            block_indent = 0

        texts: List[str] = []
        for line in captured:
            if line.kind is LineKind.BLANK:
                texts.append(line.raw[block_indent:] if line.indent > block_indent else "")
                continue
            if line.indent < block_indent:
                raise YAMLSyntaxError(
                    "block scalar line is less indented than the first line",
                    line.number,
                    line.raw,
                )
            texts.append(line.raw[block_indent:])
        return texts


def parse_stream(text: str) -> Stream:
    """Parse ``text`` into a :class:`Stream` of documents.

    The whole input either parses or a :class:`ParseError` subclass is raised;
    there are no partial results.
    """

    lines = classify_lines(text)
    stream = Stream()
    for source in split_documents(lines):
        stream.add(BlockParser(source).parse(), version=source.version)
    logger.debug("Parsed %d document(s) from %d line(s)", len(stream), len(lines))
    return stream
