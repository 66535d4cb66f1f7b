from __future__ import annotations

from enum import Enum
from typing import Any


class Environment(str, Enum):
    """Which deployment of the registry service a request targets.

    Notes:
    - Production and preview may define the same field name differently, so
      anything keyed by field or record type also carries the environment.
    - `from_any` still accepts the historical `from_openregister` boolean flag.
    """

    PRODUCTION = "production"
    PREVIEW = "preview"

    @property
    def is_preview(self) -> bool:
        return self is Environment.PREVIEW

    @classmethod
    def from_any(cls, value: Any) -> "Environment":
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.PRODUCTION
        if isinstance(value, bool):
            return cls.PREVIEW if value else cls.PRODUCTION

        v = str(value).strip().lower().replace("_", "-")
        aliases: dict[str, Environment] = {
            # canonical
            "production": cls.PRODUCTION,
            "preview": cls.PREVIEW,
            # short aliases
            "prod": cls.PRODUCTION,
            "live": cls.PRODUCTION,
            "alpha": cls.PREVIEW,
            # host-derived names
            "gov.uk": cls.PRODUCTION,
            "register.gov.uk": cls.PRODUCTION,
            "openregister": cls.PREVIEW,
            "openregister.org": cls.PREVIEW,
            "alpha.openregister.org": cls.PREVIEW,
            "from-openregister": cls.PREVIEW,
        }
        if v in aliases:
            return aliases[v]

        raise ValueError(f"Unsupported environment {value!r}. Use Environment.PRODUCTION or Environment.PREVIEW.")
