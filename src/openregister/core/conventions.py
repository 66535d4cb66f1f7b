from __future__ import annotations

from typing import Any

from .errors import MalformedCurieError


REGISTER_TYPE = "register"
FIELD_TYPE = "field"

# Publication metadata carried by every entry; never resolved.
ENTRY_RESOURCE_ATTRIBUTES: frozenset[str] = frozenset({"entry_number", "entry_timestamp", "item_hash"})

# Attributes starting with this prefix hold resolver-internal or munged values.
INTERNAL_PREFIX = "_"

MULTIVALUE_SEPARATOR = ";"
CURIE_SEPARATOR = ":"

CARDINALITY_ONE = "1"
CARDINALITY_N = "n"
DATATYPE_CURIE = "curie"


def attribute_name(wire_name: str) -> str:
    """Wire name (`official-name`) to attribute name (`official_name`)."""
    return str(wire_name).strip().replace("-", "_")


def field_name(attribute: str) -> str:
    """Attribute name (`official_name`) to wire name (`official-name`)."""
    return str(attribute).replace("_", "-")


def is_entry_resource_field(attribute: str) -> bool:
    return attribute in ENTRY_RESOURCE_ATTRIBUTES


def is_internal_attribute(attribute: str) -> bool:
    return attribute.startswith(INTERNAL_PREFIX)


def is_plain_attribute(attribute: str) -> bool:
    """True for attributes that may carry field metadata at all."""
    return not is_entry_resource_field(attribute) and not is_internal_attribute(attribute)


def split_multivalued(value: Any) -> Any:
    """Split a raw `a;b;c` cell into a list.

    Anything that is not a string (already split, or absent) is returned as-is.
    """
    if not isinstance(value, str):
        return value
    if value == "":
        return []
    return value.split(MULTIVALUE_SEPARATOR)


def parse_curie(value: Any) -> tuple[str, str]:
    """Split `country:FR` into `("country", "FR")` on the first colon."""
    register, sep, key = str(value).partition(CURIE_SEPARATOR)
    if not sep or not register or not key:
        raise MalformedCurieError(value)
    return register, key
