from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .errors import YAMLSyntaxError
from .lines import Line, LineKind


@dataclass
class DocumentSource:
    """The lines that make up one document, before structure is parsed.

    ``inline`` is the payload written on the ``---`` line itself (``--- {}``),
    ``None`` when the boundary line carried nothing.
    """

    start: int
    version: Optional[str] = None
    inline: Optional[str] = None
    lines: List[Line] = field(default_factory=list)
    closed: bool = False


def split_documents(lines: List[Line]) -> List[DocumentSource]:
    """Group classified lines into documents.

    A stream without any boundary is one implicit document. An empty stream, or
    one holding only blank lines and comments, has no documents at all.
    """

    documents: List[DocumentSource] = []
    current: DocumentSource | None = None
    pending: Line | None = None

    for line in lines:
        kind = line.kind

        if kind is LineKind.DIRECTIVE:
            if pending is not None:
                raise YAMLSyntaxError(
                    "duplicate %YAML directive", line.number, line.raw
                )
            pending = line
            continue

        if kind is LineKind.BOUNDARY:
            current = DocumentSource(
                start=line.number,
                version=_version_for(pending, line),
                inline=line.payload or None,
            )
            documents.append(current)
            pending = None
            continue

        if kind is LineKind.END:
            if current is not None:
                current.closed = True
            continue

        if kind in (LineKind.BLANK, LineKind.COMMENT):
            if current is not None and not current.closed and pending is None:
                current.lines.append(line)
            continue

        if current is None or current.closed:
            if current is not None and pending is None:
                raise YAMLSyntaxError(
                    "content after document end marker", line.number, line.raw
                )
            if documents and pending is not None:
                raise YAMLSyntaxError(
                    "directive must be followed by a document boundary",
                    pending.number,
                    pending.raw,
                )
            current = DocumentSource(start=line.number, version=_version_for(pending, line))
            documents.append(current)
            pending = None
        elif pending is not None:
            raise YAMLSyntaxError(
                "directive must be followed by a document boundary",
                pending.number,
                pending.raw,
            )

        current.lines.append(line)

    if pending is not None:
        raise YAMLSyntaxError(
            "directive is not followed by a document", pending.number, pending.raw
        )

    return documents


def _version_for(directive: Line | None, boundary: Line) -> str | None:
    if directive is None:
        return boundary.version
    if boundary.version is not None:
        raise YAMLSyntaxError(
            "duplicate %YAML directive", boundary.number, boundary.raw
        )
    return directive.version
