from __future__ import annotations


class OpenRegisterError(Exception):
    """Base exception for openregister client errors."""


class MalformedCurieError(OpenRegisterError, ValueError):
    """A curie value is not of the form `<register>:<key>`."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Malformed curie {value!r}: expected '<register>:<key>'")


class UnknownReferenceError(OpenRegisterError, AttributeError):
    """`Record.related()` was asked for an attribute that is not a reference."""


class DetachedRecordError(OpenRegisterError):
    """A record needs a client to resolve references but was never hydrated through one."""
