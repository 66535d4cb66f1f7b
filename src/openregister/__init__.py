from __future__ import annotations

from .core.config import ClientSettings
from .core.environments import Environment
from .core.errors import DetachedRecordError, MalformedCurieError, OpenRegisterError, UnknownReferenceError
from .core.records import AttributeStrategy, Field, Record, Register, RecordType
from .sdk.client import OpenRegisterClient, field, record, records_for, register, registers

__version__ = "0.1.0"

__all__ = [
    "OpenRegisterClient",
    "ClientSettings",
    "Environment",
    "Record",
    "Register",
    "Field",
    "RecordType",
    "AttributeStrategy",
    "OpenRegisterError",
    "MalformedCurieError",
    "UnknownReferenceError",
    "DetachedRecordError",
    "registers",
    "register",
    "records_for",
    "record",
    "field",
]
