"""Read and write Tiny YAML files as UTF-8."""

from __future__ import annotations

import codecs
import pathlib
from typing import Any, List

from .errors import EncodingError
from .logging_utils import get_logger
from .model import Stream
from .parser import parse_stream
from .serializer import serialize_stream

logger = get_logger(__name__)

_FOREIGN_BOMS = (
    (codecs.BOM_UTF32_LE, "UTF-32"),
    (codecs.BOM_UTF32_BE, "UTF-32"),
    (codecs.BOM_UTF16_LE, "UTF-16"),
    (codecs.BOM_UTF16_BE, "UTF-16"),
)


def decode_bytes(data: bytes) -> str:
    """Decode ``data`` as strict UTF-8, dropping a UTF-8 byte order mark."""

    # UTF-32 LE starts with the UTF-16 LE mark, so it is checked first
    for bom, name in _FOREIGN_BOMS:
        if data.startswith(bom):
            raise EncodingError(f"stream has a {name} byte order mark; only UTF-8 is supported")

    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise EncodingError(f"stream is not valid UTF-8: {exc}") from exc


def read_file(path: str | pathlib.Path) -> Stream:
    path = pathlib.Path(path)
    stream = parse_stream(decode_bytes(path.read_bytes()))
    logger.debug("Read %d document(s) from %s", len(stream), path)
    return stream


def write_file(stream: Stream, path: str | pathlib.Path) -> None:
    """Serialize ``stream`` and write it to ``path``.

    The text is rendered completely before the file is opened, so a
    serialization error never leaves a truncated file behind.
    """

    path = pathlib.Path(path)
    text = serialize_stream(stream)
    path.write_bytes(text.encode("utf-8"))
    logger.debug("Wrote %d document(s) to %s", len(stream), path)


def load_file(path: str | pathlib.Path) -> List[Any]:
    return read_file(path).values()


def dump_file(path: str | pathlib.Path, *values: Any) -> None:
    write_file(Stream.from_values(values), path)
