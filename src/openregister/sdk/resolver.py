from __future__ import annotations

import logging

from ..core.conventions import is_entry_resource_field, is_internal_attribute
from ..core.environments import Environment
from ..core.records import (
    CURIE_RESOLVE,
    NO_AUGMENTATION,
    SPLIT_MULTIVALUED,
    AttributeStrategy,
    RecordType,
    foreign_key_resolve,
)
from .fields import FieldMetadataCache, cardinality_n


logger = logging.getLogger(__name__)


def is_bootstrap_attribute(record_type: RecordType, attribute: str) -> bool:
    """Register and field records describe the metadata itself and are not resolved.

    The one exception is a register's `fields` list.
    """
    return record_type.is_field or (record_type.is_register and attribute != "fields")


class AttributeResolver:
    """Decides and installs the read strategy for each newly discovered attribute.

    Used as a `TabularDecoder` listener. Field metadata is looked up in the
    record type's own environment, which may fetch (and decode) field records
    while a notification is still being handled.
    """

    def __init__(self, fields: FieldMetadataCache) -> None:
        self.fields = fields
        self._in_flight: set[tuple[str, Environment, str]] = set()

    def __call__(self, record_type: RecordType, attribute: str) -> None:
        self.on_attribute_discovered(record_type, attribute)

    def on_attribute_discovered(self, record_type: RecordType, attribute: str) -> AttributeStrategy | None:
        key = (record_type.name, record_type.environment, attribute)
        if key in self._in_flight:
            return None
        if record_type.has_strategy(attribute):
            return record_type.strategy_for(attribute)

        self._in_flight.add(key)
        try:
            strategy = self.decide(record_type, attribute)
        finally:
            self._in_flight.discard(key)

        installed = record_type.install(attribute, strategy)
        if installed.kind != "none":
            logger.debug("%s.%s (%s): %s", record_type.name, attribute, record_type.environment.value, installed)
        return installed

    def decide(self, record_type: RecordType, attribute: str) -> AttributeStrategy:
        if is_bootstrap_attribute(record_type, attribute):
            return NO_AUGMENTATION
        if is_entry_resource_field(attribute) or is_internal_attribute(attribute):
            return NO_AUGMENTATION

        descriptor = self.fields.descriptor(attribute, record_type.environment)
        if descriptor is None:
            return NO_AUGMENTATION
        if descriptor.is_curie:
            return CURIE_RESOLVE
        if cardinality_n(descriptor):
            return SPLIT_MULTIVALUED
        register = descriptor.target_register
        if register:
            return foreign_key_resolve(register)
        return NO_AUGMENTATION

    def in_flight(self) -> set[tuple[str, Environment, str]]:
        return set(self._in_flight)
