"""Record model, naming conventions, environments and settings.

Nothing in here performs I/O; fetching lives in `openregister.sdk`.
"""

from __future__ import annotations

from .config import ClientSettings
from .environments import Environment
from .records import (
    CURIE_RESOLVE,
    NO_AUGMENTATION,
    SPLIT_MULTIVALUED,
    AttributeStrategy,
    Field,
    Record,
    RecordType,
    Register,
    foreign_key_resolve,
)

__all__ = [
    "ClientSettings",
    "Environment",
    "AttributeStrategy",
    "NO_AUGMENTATION",
    "SPLIT_MULTIVALUED",
    "CURIE_RESOLVE",
    "foreign_key_resolve",
    "Record",
    "RecordType",
    "Register",
    "Field",
]
