"""Dump/Load convenience API mirroring PyYAML's public functions.

``load``/``dump`` work with plain lists of top-level values, one per document.
``safe_load`` and friends accept the same stream shapes PyYAML does (text,
bytes or an open file) so existing callers can switch with an import change.
"""

from __future__ import annotations

from typing import IO, Any, Iterable, List

from .files import decode_bytes
from .model import Stream
from .parser import parse_stream
from .serializer import serialize_stream


def _read_stream(stream: str | bytes | IO[str] | IO[bytes]) -> str:
    if hasattr(stream, "read"):
        stream = stream.read()  # type: ignore[union-attr]

    if isinstance(stream, bytes):
        return decode_bytes(stream)

    return str(stream)


def _write_stream(text: str, stream: IO[str] | None) -> str | None:
    if stream is None:
        return text
    stream.write(text)
    return None


def load(text: str) -> List[Any]:
    """Parse ``text`` and return the value of every document, in order."""

    return parse_stream(text).values()


def dump(*values: Any) -> str:
    """Serialize each of ``values`` as its own document."""

    return serialize_stream(Stream.from_values(values))


def safe_load(stream: str | bytes | IO[str] | IO[bytes]) -> Any:
    """Return the value of the last document, or ``None`` for an empty stream."""

    values = load(_read_stream(stream))
    if not values:
        return None
    return values[-1]


def safe_load_all(stream: str | bytes | IO[str] | IO[bytes]) -> List[Any]:
    return load(_read_stream(stream))


def safe_dump(data: Any, stream: IO[str] | None = None, **_: Any) -> str | None:
    """Serialize ``data`` as a single document.

    Returns the text, or writes it to ``stream`` and returns ``None``. Extra
    keyword arguments accepted by PyYAML are ignored.
    """

    return _write_stream(dump(data), stream)


def safe_dump_all(documents: Iterable[Any], stream: IO[str] | None = None, **_: Any) -> str | None:
    return _write_stream(dump(*documents), stream)
