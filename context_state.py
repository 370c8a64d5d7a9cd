from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterator, MutableMapping, Tuple

from telemetry import TelemetryCollector


@dataclass
class ContextState(MutableMapping[str, Any]):
    """Typed wrapper around Click's context store.

    Item access mirrors the attributes so commands can use either
    ``ctx.obj.json_indent`` or ``ctx.obj["json_indent"]``.
    """

    config: Dict[str, Any] = field(default_factory=dict)
    json_indent: int | None = 2
    ensure_ascii: bool = False
    verbose: bool = False
    quiet: bool = False
    stats: bool = False
    telemetry: TelemetryCollector = field(default_factory=TelemetryCollector)

    def _names(self) -> Tuple[str, ...]:
        return tuple(item.name for item in fields(self))

    def _check(self, key: str) -> None:
        if key not in self._names():
            raise KeyError(key)

    def __getitem__(self, key: str) -> Any:
        self._check(key)
        return getattr(self, key)

    def __setitem__(self, key: str, value: Any) -> None:
        self._check(key)
        setattr(self, key, value)

    def __delitem__(self, key: str) -> None:
        self._check(key)
        setattr(self, key, None)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names())

    def __len__(self) -> int:
        return len(self._names())

    def dump_json(self, data: Any) -> str:
        """Render ``data`` with the JSON options taken from the config file."""

        return json.dumps(data, indent=self.json_indent, ensure_ascii=self.ensure_ascii)
