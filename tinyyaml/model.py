from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

# null, string, sequence, mapping
Node = Union[None, str, List[Any], Dict[str, Any]]


@dataclass
class Document:
    """One top-level value of a stream.

    ``version`` holds the text of a ``%YAML`` directive that preceded the
    document. It is recorded and written back but never changes parsing.
    """

    value: Node = None
    version: Optional[str] = None


class Stream:
    """Ordered collection of :class:`Document` objects."""

    def __init__(self, documents: Iterable[Document] | None = None) -> None:
        self._documents: List[Document] = list(documents or [])

    @classmethod
    def from_values(cls, values: Iterable[Any]) -> "Stream":
        return cls(Document(value) for value in values)

    @property
    def documents(self) -> List[Document]:
        return self._documents

    def add(self, value: Any, version: str | None = None) -> Document:
        document = Document(value, version)
        self._documents.append(document)
        return document

    def values(self) -> List[Any]:
        return [document.value for document in self._documents]

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __getitem__(self, index: int) -> Document:
        return self._documents[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Stream):
            return NotImplemented
        return self._documents == other._documents

    def __repr__(self) -> str:
        return f"Stream({self._documents!r})"
