from __future__ import annotations

import logging

from ..core.config import ClientSettings
from ..core.conventions import FIELD_TYPE, is_plain_attribute
from ..core.environments import Environment
from ..core.records import Field, Record
from ..io.tabular import TabularDecoder
from .fields import FieldMetadataCache
from .paginator import Feed, Paginator, feed_url
from .resolver import AttributeResolver


logger = logging.getLogger(__name__)


class RecordHydrator:
    """Fetches feeds into records and wires up attribute resolution.

    Owns the field metadata cache and the attribute resolver, so their
    lifetime is the hydrator's (one per client).
    """

    def __init__(
        self,
        paginator: Paginator,
        settings: ClientSettings | None = None,
        *,
        decoder: TabularDecoder | None = None,
    ) -> None:
        self.paginator = paginator
        self.settings = settings or ClientSettings()
        self.decoder = decoder or TabularDecoder()
        self.fields = FieldMetadataCache(self._load_field)
        self.resolver = AttributeResolver(self.fields)

    def records(
        self,
        register: str,
        environment: Environment | str | bool | None = None,
        all: bool = False,
        page_size: int | None = None,
    ) -> list[Record]:
        if page_size is None:
            page_size = self.settings.page_size
        return self.fetch(register, "records", environment, all=all, page_size=page_size).rows

    def record(self, register: str, key: str, environment: Environment | str | bool | None = None) -> Record | None:
        feed = self.fetch(register, f"record/{key}", environment)
        return feed.rows[0] if feed.rows else None

    def field(self, name: str, environment: Environment | str | bool | None = None) -> Field | None:
        return self.fields.descriptor(name, environment)

    def fetch(
        self,
        register: str,
        path: str,
        environment: Environment | str | bool | None = None,
        *,
        all: bool = False,
        page_size: int | None = None,
    ) -> Feed:
        env = Environment.from_any(environment)
        fmt = self.settings.feed_format
        url = feed_url(
            self.settings.url_for(path, register, env),
            fmt=fmt,
            page_size=page_size,
        )

        def decode_page(body: str) -> list[Record]:
            return self.decoder.decode(body, register, env, fmt)

        with self.decoder.listening(self.resolver):
            if all:
                feed = self.paginator.fetch_all(url, decode_page)
            else:
                feed = self.paginator.fetch_one(url, decode_page)

        for rec in feed.rows:
            rec._bind(self)
        for rec in feed.rows:
            self._materialize_multivalued(rec)
        return feed

    def _materialize_multivalued(self, rec: Record) -> None:
        # Split every cardinality-n cell now so callers always see lists.
        if rec.record_type.is_field:
            return
        for attr in rec.record_type.attributes():
            if attr not in rec or not is_plain_attribute(attr):
                continue
            if self.fields.is_cardinality_n(attr, rec.environment):
                rec.read(attr)

    def _load_field(self, name: str, environment: Environment) -> Field | None:
        rec = self.record(FIELD_TYPE, name, environment)
        if rec is not None and not isinstance(rec, Field):
            raise TypeError(f"Expected a field record for {name!r}, got {type(rec).__name__}")
        return rec
