from __future__ import annotations

import contextlib
import csv
import io
import json
from typing import Any, Callable, Iterable, Iterator

from ..core.conventions import INTERNAL_PREFIX, attribute_name
from ..core.environments import Environment
from ..core.records import Record, RecordType, record_class_for


AttributeListener = Callable[[RecordType, str], None]


def parse_tsv(text: str) -> list[dict[str, str]]:
    """Parse a register TSV body into rows keyed by the header's wire names.

    Cells are never quoted on the wire, so quote characters are kept verbatim.
    Short rows are padded with empty cells; extra cells are dropped.
    """

    reader = csv.reader(io.StringIO(text), delimiter="\t", quoting=csv.QUOTE_NONE)
    header: list[str] | None = None
    rows: list[dict[str, str]] = []
    for cells in reader:
        if not cells or all(not c.strip() for c in cells):
            continue
        if header is None:
            header = [c.strip() for c in cells]
            continue
        padded = list(cells[: len(header)]) + [""] * max(0, len(header) - len(cells))
        rows.append(dict(zip(header, padded)))
    return rows


def _munge_json_row(obj: dict[str, Any]) -> dict[str, Any]:
    # `hash` is publication metadata; `entry` wraps the item's own fields.
    row: dict[str, Any] = {}
    for k, v in obj.items():
        if k == "hash":
            row[f"{INTERNAL_PREFIX}hash"] = v
        elif k == "entry" and isinstance(v, dict):
            row.update(v)
        else:
            row[k] = v
    return row


def parse_json(text: str) -> list[dict[str, Any]]:
    """Parse a register JSON body into rows.

    Accepts a list of objects, a single object, or an object keyed by record key.
    """

    data = json.loads(text)
    if isinstance(data, list):
        items = [d for d in data if isinstance(d, dict)]
    elif isinstance(data, dict):
        if data and "entry" not in data and all(isinstance(v, dict) for v in data.values()):
            items = list(data.values())
        else:
            items = [data]
    else:
        raise ValueError(f"Unsupported JSON feed body: expected object or list, got {type(data).__name__}")
    return [_munge_json_row(d) for d in items]


class TabularDecoder:
    """Turns feed bodies into typed records.

    Record types are created on demand per (register, environment). The first
    time an attribute appears on a type, the active listener (if any) is told
    about it, once for the decoder's lifetime.
    """

    def __init__(self) -> None:
        self._types: dict[tuple[str, Environment], RecordType] = {}
        self._listeners: list[AttributeListener] = []

    def record_type(self, name: str, environment: Environment | str | bool | None = None) -> RecordType:
        env = Environment.from_any(environment)
        key = (str(name), env)
        rt = self._types.get(key)
        if rt is None:
            rt = RecordType(str(name), env, record_class_for(str(name)))
            self._types[key] = rt
        return rt

    def record_types(self) -> list[RecordType]:
        return list(self._types.values())

    # -- listeners -------------------------------------------------------

    @property
    def active_listener(self) -> AttributeListener | None:
        return self._listeners[-1] if self._listeners else None

    def add_listener(self, listener: AttributeListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: AttributeListener) -> None:
        for i in range(len(self._listeners) - 1, -1, -1):
            if self._listeners[i] is listener:
                del self._listeners[i]
                return
        raise ValueError("listener is not registered")

    @contextlib.contextmanager
    def listening(self, listener: AttributeListener) -> Iterator[None]:
        """Make `listener` the active one; the previous one is restored on exit."""
        self.add_listener(listener)
        try:
            yield
        finally:
            self.remove_listener(listener)

    # -- decoding --------------------------------------------------------

    def decode(
        self,
        text: str,
        type_name: str,
        environment: Environment | str | bool | None = None,
        fmt: str = "tsv",
    ) -> list[Record]:
        if fmt == "tsv":
            rows: list[dict[str, Any]] = parse_tsv(text)
        elif fmt == "json":
            rows = parse_json(text)
        else:
            raise ValueError(f"Unsupported feed format {fmt!r}")
        return self.build(self.record_type(type_name, environment), rows)

    def build(self, record_type: RecordType, rows: Iterable[dict[str, Any]]) -> list[Record]:
        records: list[Record] = []
        for row in rows:
            values: dict[str, Any] = {}
            for wire, value in row.items():
                attr = attribute_name(wire)
                values[attr] = value
                if record_type.add_attribute(attr):
                    try:
                        self._notify(record_type, attr)
                    except Exception:
                        # Not decided yet; the next row or feed notifies again.
                        record_type.forget_attribute(attr)
                        raise
            records.append(record_type.record_class(record_type, values))
        return records

    def _notify(self, record_type: RecordType, attribute: str) -> None:
        listener = self.active_listener
        if listener is not None:
            listener(record_type, attribute)
