"""Write streams of documents back out as Tiny YAML text.

Output is canonical: two columns of indentation per level, one entry per
line, ``{}``/``[]`` for empty collections and quoting only where a plain
scalar would be read back differently.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Iterable, Iterator, List, Set, Tuple

from .errors import CircularReferenceError, SerializeError, UnsupportedTypeError
from .logging_utils import get_logger
from .model import Document, Stream

logger = get_logger(__name__)

INDENT = 2

_BOOLEANS = frozenset(
    "y Y yes Yes YES n N no No NO true True TRUE false False FALSE on On ON off Off OFF".split()
)
_NULLS = frozenset(["~", "null", "Null", "NULL"])
_INDICATORS = frozenset("-?:#&*!|>'\"%@`{}[],~")
_KEY_INDICATORS = frozenset("?#&*!|>'\"%@`{}[]")

_NUMBER = re.compile(
    r"""^[-+]?(?:
        [0-9][0-9_]*
      | 0o[0-7_]+
      | 0x[0-9a-fA-F_]+
      | 0b[01_]+
      | [0-9][0-9_]*(?::[0-5]?[0-9])+(?:\.[0-9_]*)?
      | (?:[0-9][0-9_]*)?\.[0-9_]*(?:[eE][-+]?[0-9]+)?
      | [0-9][0-9_]*[eE][-+]?[0-9]+
      | \.(?:inf|Inf|INF|nan|NaN|NAN)
    )$""",
    re.VERBOSE,
)
_TIMESTAMP = re.compile(r"^[0-9]{4}-[0-9]{1,2}-[0-9]{1,2}(?:[Tt ]|$)")
_NEEDS_ESCAPE = re.compile(r"[\x00-\x1f\x7f-\x9f]")

_ESCAPES = {
    "\n": "\\n",
    "\t": "\\t",
    '"': '\\"',
    "\\": "\\\\",
    "\x00": "\\0",
    "\x07": "\\a",
    "\x08": "\\b",
    "\x0b": "\\v",
    "\x0c": "\\f",
    "\r": "\\r",
    "\x1b": "\\e",
}


def needs_quotes(text: str) -> bool:
    """Return ``True`` when ``text`` would not survive as a plain scalar."""

    if not text:
        return True
    if text in _BOOLEANS or text in _NULLS:
        return True
    if _NUMBER.match(text) or _TIMESTAMP.match(text):
        return True
    if text[0] in _INDICATORS or text != text.strip():
        return True
    if ": " in text or " #" in text or text.endswith(":"):
        return True
    return _NEEDS_ESCAPE.search(text) is not None


def _double_quoted(text: str) -> str:
    chunks: List[str] = []
    for char in text:
        if char in _ESCAPES:
            chunks.append(_ESCAPES[char])
        elif _NEEDS_ESCAPE.match(char):
            chunks.append(f"\\x{ord(char):02X}")
        else:
            chunks.append(char)
    return '"' + "".join(chunks) + '"'


def render_scalar(value: Any) -> str:
    if value is None:
        return "~"
    if isinstance(value, bool):
        raise UnsupportedTypeError("booleans have no Tiny YAML representation")
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        raise UnsupportedTypeError(f"cannot serialize object of type {type(value).__name__}")

    if not needs_quotes(value):
        return value
    if _NEEDS_ESCAPE.search(value):
        return _double_quoted(value)
    return "'" + value.replace("'", "''") + "'"


def render_key(key: Any) -> str:
    if not isinstance(key, str):
        raise UnsupportedTypeError(f"mapping keys must be strings, not {type(key).__name__}")
    if (
        not key
        or key != key.strip()
        or key[0] in _KEY_INDICATORS
        or key.startswith(("- ", "--- "))
        or ": " in key
        or " #" in key
        or key.endswith(":")
        or _NEEDS_ESCAPE.search(key)
    ):
        raise SerializeError(f"mapping key {key!r} cannot be written as a plain scalar")
    return key


def _is_collection(value: Any) -> bool:
    return isinstance(value, (list, tuple, Mapping))


def _inline(value: Any) -> str:
    if isinstance(value, Mapping):
        return "{}"
    if isinstance(value, (list, tuple)):
        return "[]"
    return render_scalar(value)


def _entries(value: Any) -> Iterator[Tuple[str, Any]]:
    if isinstance(value, Mapping):
        for key, child in value.items():
            yield render_key(key) + ":", child
    else:
        for child in value:
            yield "-", child


def check_tree(values: Iterable[Any]) -> None:
    """Reject object graphs where a container is reachable twice.

    Shared sub-containers and cycles both fail with
    :class:`CircularReferenceError` before anything is written.
    """

    seen: Set[int] = set()
    pending = list(values)
    while pending:
        value = pending.pop()
        if isinstance(value, Mapping):
            children: Iterable[Any] = value.values()
        elif isinstance(value, (list, tuple)):
            children = value
        else:
            continue

        # the empty tuple is an interpreter-wide singleton
        if isinstance(value, tuple) and not value:
            continue
        if id(value) in seen:
            logger.debug("Rejected %s reachable through more than one path", type(value).__name__)
            raise CircularReferenceError(
                f"{type(value).__name__} is referenced more than once or contains itself"
            )
        seen.add(id(value))
        pending.extend(children)


def _emit_document(document: Document, out: List[str]) -> None:
    if document.version is not None:
        out.append(f"%YAML {document.version}")

    value = document.value
    if not _is_collection(value) or not value:
        out.append(f"--- {_inline(value)}")
        return

    out.append("---")
    stack: List[Tuple[int, Iterator[Tuple[str, Any]]]] = [(0, _entries(value))]
    while stack:
        indent, entries = stack[-1]
        entry = next(entries, None)
        if entry is None:
            stack.pop()
            continue

        prefix, child = entry
        pad = " " * indent
        if _is_collection(child) and child:
            out.append(pad + prefix)
            stack.append((indent + INDENT, _entries(child)))
        else:
            out.append(f"{pad}{prefix} {_inline(child)}")


def serialize_stream(stream: Stream | Iterable[Any]) -> str:
    """Render ``stream`` as text; an empty stream renders as ``""``.

    A plain iterable of values is accepted and treated as one document per
    value.
    """

    if not isinstance(stream, Stream):
        stream = Stream.from_values(stream)

    check_tree(document.value for document in stream)

    out: List[str] = []
    for document in stream:
        _emit_document(document, out)

    logger.debug("Serialized %d document(s) into %d line(s)", len(stream), len(out))
    return "\n".join(out) + "\n" if out else ""
