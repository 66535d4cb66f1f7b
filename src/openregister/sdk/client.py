from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.config import ClientSettings
from ..core.conventions import REGISTER_TYPE
from ..core.environments import Environment
from ..core.records import Field, Record, Register
from ..io.tabular import TabularDecoder
from .fields import FieldMetadataCache
from .hydrator import RecordHydrator
from .paginator import Paginator
from .resolver import AttributeResolver


logger = logging.getLogger(__name__)


class OpenRegisterClient:
    """HTTP client for reading registers, records and field metadata.

    Every operation takes an `environment` (production by default; anything
    `Environment.from_any` accepts, including the legacy `from_openregister`
    boolean). Field metadata and register lists are cached per environment
    for the lifetime of the client.

    Usage:
        with OpenRegisterClient() as client:
            france = client.record("country", "FR")
            print(france.name)
    """

    def __init__(self, settings: ClientSettings | None = None, *, http: httpx.Client | None = None) -> None:
        self.settings = settings or ClientSettings.from_env()
        self._owns_http = http is None
        self.http = http if http is not None else httpx.Client(timeout=self.settings.timeout_s)
        self.decoder = TabularDecoder()
        self.paginator = Paginator(self.http)
        self.hydrator = RecordHydrator(self.paginator, self.settings, decoder=self.decoder)
        self._registers: dict[Environment, list[Register]] = {}

    def __enter__(self) -> "OpenRegisterClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    @property
    def fields(self) -> FieldMetadataCache:
        return self.hydrator.fields

    @property
    def resolver(self) -> AttributeResolver:
        return self.hydrator.resolver

    def registers(self, environment: Environment | str | bool | None = None) -> list[Register]:
        env = Environment.from_any(environment)
        if env not in self._registers:
            rows = self.hydrator.records(REGISTER_TYPE, env, all=True)
            self._registers[env] = [r for r in rows if isinstance(r, Register)]
        return list(self._registers[env])

    def register(self, name: str, environment: Environment | str | bool | None = None) -> Register | None:
        for reg in self.registers(environment):
            if reg.get("register") == name:
                return reg
        return None

    def records_for(
        self,
        register: str,
        environment: Environment | str | bool | None = None,
        *,
        all: bool = False,
        page_size: int | None = None,
    ) -> list[Record]:
        return self.hydrator.records(register, environment, all=all, page_size=page_size)

    def record(self, register: str, key: str, environment: Environment | str | bool | None = None) -> Record | None:
        key_s = str(key).strip()
        if not key_s:
            raise ValueError("key cannot be empty")
        return self.hydrator.record(register, key_s, environment)

    def field(self, name: str, environment: Environment | str | bool | None = None) -> Field | None:
        return self.hydrator.field(name, environment)


_DEFAULT_CLIENT: OpenRegisterClient | None = None


def default_client() -> OpenRegisterClient:
    """Process-wide client used by the module-level helpers."""
    global _DEFAULT_CLIENT
    if _DEFAULT_CLIENT is None:
        _DEFAULT_CLIENT = OpenRegisterClient()
    return _DEFAULT_CLIENT


def registers(environment: Environment | str | bool | None = None) -> list[Register]:
    return default_client().registers(environment)


def register(name: str, environment: Environment | str | bool | None = None) -> Register | None:
    return default_client().register(name, environment)


def records_for(
    register: str,
    environment: Environment | str | bool | None = None,
    *,
    all: bool = False,
    page_size: int | None = None,
) -> list[Record]:
    return default_client().records_for(register, environment, all=all, page_size=page_size)


def record(register: str, key: str, environment: Environment | str | bool | None = None) -> Record | None:
    return default_client().record(register, key, environment)


def field(name: str, environment: Environment | str | bool | None = None) -> Field | None:
    return default_client().field(name, environment)
