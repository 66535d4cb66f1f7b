from __future__ import annotations

import pytest

from openregister import MalformedCurieError
from openregister.core.conventions import (
    attribute_name,
    field_name,
    is_entry_resource_field,
    is_internal_attribute,
    is_plain_attribute,
    parse_curie,
    split_multivalued,
)


def test_name_translation_between_wire_and_attribute() -> None:
    assert field_name("official_name") == "official-name"
    assert field_name("local_authority_eng") == "local-authority-eng"
    assert attribute_name("citizen-names") == "citizen_names"
    assert attribute_name(field_name("start_date")) == "start_date"


@pytest.mark.parametrize("attr", ["entry_number", "entry_timestamp", "item_hash"])
def test_entry_resource_attributes_are_not_plain(attr: str) -> None:
    assert is_entry_resource_field(attr)
    assert not is_plain_attribute(attr)


def test_internal_prefix() -> None:
    assert is_internal_attribute("_hash")
    assert not is_plain_attribute("_country")
    assert is_plain_attribute("country")


def test_split_multivalued_is_idempotent() -> None:
    once = split_multivalued("a;b;c")
    assert once == ["a", "b", "c"]
    twice = split_multivalued(once)
    assert twice is once
    assert split_multivalued("") == []
    assert split_multivalued(None) is None


def test_parse_curie_splits_on_first_colon() -> None:
    assert parse_curie("country:FR") == ("country", "FR")
    assert parse_curie("address:12:b") == ("address", "12:b")


@pytest.mark.parametrize("value", ["FR", ":FR", "country:", ""])
def test_parse_curie_rejects_malformed(value: str) -> None:
    with pytest.raises(MalformedCurieError):
        parse_curie(value)
    # Also a ValueError for callers that don't know the package errors.
    with pytest.raises(ValueError):
        parse_curie(value)
