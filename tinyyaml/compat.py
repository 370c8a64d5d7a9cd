"""Deprecated error-string interface.

Older callers checked a process-wide error message instead of catching
exceptions. These wrappers keep that contract: they return ``None``/``False``
on failure and remember the message for :func:`errstr`. New code should call
:mod:`tinyyaml` directly and handle :class:`~tinyyaml.errors.TinyYAMLError`.
"""

from __future__ import annotations

import pathlib
import warnings
from typing import Optional

from .errors import TinyYAMLError
from .files import read_file, write_file
from .model import Stream
from .parser import parse_stream
from .serializer import serialize_stream

_last_error = ""


def _deprecated(name: str) -> None:
    warnings.warn(
        f"tinyyaml.compat.{name} is deprecated; catch TinyYAMLError instead",
        DeprecationWarning,
        stacklevel=3,
    )


def _record(exc: TinyYAMLError | OSError | None) -> None:
    global _last_error
    _last_error = "" if exc is None else str(exc)


def errstr() -> str:
    """Return the message of the last failed call, or ``""``."""

    _deprecated("errstr")
    return _last_error


def read_string(text: str) -> Optional[Stream]:
    _deprecated("read_string")
    try:
        stream = parse_stream(text)
    except TinyYAMLError as exc:
        _record(exc)
        return None
    _record(None)
    return stream


def write_string(stream: Stream) -> Optional[str]:
    _deprecated("write_string")
    try:
        text = serialize_stream(stream)
    except TinyYAMLError as exc:
        _record(exc)
        return None
    _record(None)
    return text


def read(path: str | pathlib.Path) -> Optional[Stream]:
    _deprecated("read")
    try:
        stream = read_file(path)
    except (TinyYAMLError, OSError) as exc:
        _record(exc)
        return None
    _record(None)
    return stream


def write(stream: Stream, path: str | pathlib.Path) -> bool:
    _deprecated("write")
    try:
        write_file(stream, path)
    except (TinyYAMLError, OSError) as exc:
        _record(exc)
        return False
    _record(None)
    return True
