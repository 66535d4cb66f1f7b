from __future__ import annotations

import logging
from typing import Callable

from ..core.conventions import CARDINALITY_N, field_name
from ..core.environments import Environment
from ..core.records import Field


logger = logging.getLogger(__name__)


FieldLoader = Callable[[str, Environment], "Field | None"]


def cardinality_n(descriptor: Field | None) -> bool:
    return descriptor is not None and descriptor.get("cardinality") == CARDINALITY_N


class FieldMetadataCache:
    """Field descriptors keyed by (wire field name, environment).

    Entries are loaded on first request through `loader` and kept for the
    lifetime of the cache, including absent ones. Attribute names are
    translated to wire names before lookup.
    """

    def __init__(self, loader: FieldLoader) -> None:
        self._loader = loader
        self._fields: dict[tuple[str, Environment], Field | None] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def keys(self) -> list[tuple[str, Environment]]:
        return list(self._fields)

    def descriptor(self, name: str, environment: Environment | str | bool | None = None) -> Field | None:
        key = (field_name(name), Environment.from_any(environment))
        if key not in self._fields:
            logger.debug("Loading field metadata for %r (%s)", key[0], key[1].value)
            self._fields[key] = self._loader(*key)
        return self._fields[key]

    def is_cardinality_n(self, name: str, environment: Environment | str | bool | None = None) -> bool:
        return cardinality_n(self.descriptor(name, environment))
