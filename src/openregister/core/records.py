from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterator, Literal

from .conventions import (
    CARDINALITY_N,
    DATATYPE_CURIE,
    FIELD_TYPE,
    REGISTER_TYPE,
    attribute_name,
    parse_curie,
    split_multivalued,
)
from .environments import Environment
from .errors import DetachedRecordError, UnknownReferenceError

if TYPE_CHECKING:  # pragma: no cover
    from ..sdk.hydrator import RecordHydrator


StrategyKind = Literal[
    "none",
    "split",
    "curie",
    "foreign_key",
]


@dataclass(frozen=True)
class AttributeStrategy:
    """How reads of one attribute on one record type behave.

    - `none`: the raw decoded value
    - `split`: a `;`-separated cell becomes a list, stored back in place
    - `curie`: `related()` fetches `<register>:<key>` from the named register
    - `foreign_key`: `related()` fetches the raw value as a key in `register`
    """

    kind: StrategyKind = "none"
    register: str | None = None

    @property
    def is_reference(self) -> bool:
        return self.kind in ("curie", "foreign_key")


NO_AUGMENTATION = AttributeStrategy("none")
SPLIT_MULTIVALUED = AttributeStrategy("split")
CURIE_RESOLVE = AttributeStrategy("curie")


def foreign_key_resolve(register: str) -> AttributeStrategy:
    return AttributeStrategy("foreign_key", register=register)


class RecordType:
    """One register's record shape in one environment.

    Holds the attribute names seen so far (in discovery order) and the strategy
    table. A strategy, once installed for an attribute, is never replaced.
    """

    def __init__(self, name: str, environment: Environment, record_class: type["Record"]) -> None:
        self.name = name
        self.environment = environment
        self.record_class = record_class
        self._attributes: list[str] = []
        self._seen: set[str] = set()
        self._strategies: dict[str, AttributeStrategy] = {}

    def __repr__(self) -> str:
        return f"RecordType({self.name!r}, {self.environment.value!r})"

    @property
    def key(self) -> tuple[str, Environment]:
        return (self.name, self.environment)

    @property
    def is_register(self) -> bool:
        return self.name == REGISTER_TYPE

    @property
    def is_field(self) -> bool:
        return self.name == FIELD_TYPE

    def attributes(self) -> tuple[str, ...]:
        return tuple(self._attributes)

    def add_attribute(self, attribute: str) -> bool:
        """Record an attribute name; True only the first time it is seen."""
        if attribute in self._seen:
            return False
        self._seen.add(attribute)
        self._attributes.append(attribute)
        return True

    def forget_attribute(self, attribute: str) -> None:
        """Undo `add_attribute` so the next sighting counts as the first again."""
        if attribute in self._seen and attribute not in self._strategies:
            self._seen.discard(attribute)
            self._attributes.remove(attribute)

    def strategy_for(self, attribute: str) -> AttributeStrategy:
        return self._strategies.get(attribute, NO_AUGMENTATION)

    def has_strategy(self, attribute: str) -> bool:
        return attribute in self._strategies

    def install(self, attribute: str, strategy: AttributeStrategy) -> AttributeStrategy:
        """Install `strategy` unless one is already installed; return the effective one."""
        existing = self._strategies.get(attribute)
        if existing is not None:
            return existing
        self._strategies[attribute] = strategy
        return strategy

    def strategies(self) -> dict[str, AttributeStrategy]:
        return dict(self._strategies)


class Record:
    """A single row of a register feed.

    Attributes are readable by their underscore name (`record.official_name`) or
    by item access with either naming (`record["official-name"]`). Reads go
    through the record type's strategy table; reference attributes keep their
    raw value and are resolved with `related()`.

    A column named like a record member (`environment`, `get`, `read`,
    `records`, ...) is shadowed on attribute access; read it with
    `record["environment"]` instead.
    """

    def __init__(self, record_type: RecordType, values: dict[str, Any]) -> None:
        object.__setattr__(self, "_type", record_type)
        object.__setattr__(self, "_values", dict(values))
        object.__setattr__(self, "_resolved", {})
        object.__setattr__(self, "_source", None)
        object.__setattr__(self, "_environment", record_type.environment)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._type.name!r}, {self._values!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self._type.key == other._type.key and self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        values = self.__dict__.get("_values")
        if values is None or name not in values:
            raise AttributeError(f"{type(self).__name__} has no attribute {name!r}")
        return self.read(name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __getitem__(self, key: str) -> Any:
        attr = attribute_name(key)
        if attr not in self._values:
            raise KeyError(key)
        return self.read(attr)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and attribute_name(key) in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default

    @property
    def record_type(self) -> RecordType:
        return self._type

    @property
    def register_name(self) -> str:
        return self._type.name

    @property
    def environment(self) -> Environment:
        return self._environment

    @property
    def from_preview(self) -> bool:
        return self._environment.is_preview

    def attributes(self) -> tuple[str, ...]:
        return tuple(self._values)

    def to_dict(self) -> dict[str, Any]:
        return {k: self.read(k) for k in self._values}

    def read(self, attribute: str) -> Any:
        """Read an attribute through its strategy; multi-valued cells are split in place."""
        value = self._values[attribute]
        if self._type.strategy_for(attribute).kind == "split":
            value = split_multivalued(value)
            self._values[attribute] = value
        return value

    def _bind(self, source: "RecordHydrator") -> None:
        object.__setattr__(self, "_source", source)

    def related(self, attribute: str) -> "Record | None":
        """Fetch the record a curie or foreign-key attribute points at.

        The result (including an absent one) is memoized on this instance.
        """
        attr = attribute_name(attribute)
        strategy = self._type.strategy_for(attr)
        if not strategy.is_reference:
            raise UnknownReferenceError(f"{self._type.name}.{attr} is not a reference to another register")
        if attr in self._resolved:
            return self._resolved[attr]

        raw = self._values.get(attr)
        resolved: Record | None = None
        if raw not in (None, ""):
            if strategy.kind == "curie":
                register, key = parse_curie(raw)
            else:
                register, key = str(strategy.register), str(raw)
            if self._source is None:
                raise DetachedRecordError(f"Cannot resolve {self._type.name}.{attr}: record has no client")
            resolved = self._source.record(register, key, self._environment)

        self._resolved[attr] = resolved
        return resolved


class Register(Record):
    """A record of the `register` register: describes one register."""

    @property
    def key_field(self) -> str:
        """The cardinality-1 field that keys this register's records."""
        return str(self._values.get("register", ""))

    def records(self) -> list[Record]:
        if self._source is None:
            raise DetachedRecordError("Register record has no client")
        return self._source.records(self.key_field, self._environment)

    def all_records(self, page_size: int = 100) -> list[Record]:
        if self._source is None:
            raise DetachedRecordError("Register record has no client")
        return self._source.records(self.key_field, self._environment, all=True, page_size=page_size)


class Field(Record):
    """A record of the `field` register: one attribute's metadata."""

    @property
    def cardinality_n(self) -> bool:
        return self._values.get("cardinality") == CARDINALITY_N

    @property
    def is_curie(self) -> bool:
        return self._values.get("datatype") == DATATYPE_CURIE

    @property
    def target_register(self) -> str | None:
        register = self._values.get("register")
        return str(register) if register else None


def record_class_for(type_name: str) -> type[Record]:
    if type_name == REGISTER_TYPE:
        return Register
    if type_name == FIELD_TYPE:
        return Field
    return Record
