"""Reader and writer for the Tiny subset of YAML."""

from .api import dump, load, safe_dump, safe_dump_all, safe_load, safe_load_all
from .errors import (
    CircularReferenceError,
    EncodingError,
    ParseError,
    SerializeError,
    TinyYAMLError,
    UnsupportedEscapeError,
    UnsupportedFeatureError,
    UnsupportedTypeError,
    YAMLSyntaxError,
)
from .files import dump_file, load_file, read_file, write_file
from .model import Document, Node, Stream
from .parser import parse_stream
from .serializer import serialize_stream

__version__ = "1.0.0"

__all__ = [
    "CircularReferenceError",
    "Document",
    "EncodingError",
    "Node",
    "ParseError",
    "SerializeError",
    "Stream",
    "TinyYAMLError",
    "UnsupportedEscapeError",
    "UnsupportedFeatureError",
    "UnsupportedTypeError",
    "YAMLSyntaxError",
    "dump",
    "dump_file",
    "load",
    "load_file",
    "parse_stream",
    "read_file",
    "safe_dump",
    "safe_dump_all",
    "safe_load",
    "safe_load_all",
    "serialize_stream",
    "write_file",
]
