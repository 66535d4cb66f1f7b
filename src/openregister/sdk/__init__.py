from __future__ import annotations

from .client import OpenRegisterClient, default_client
from .fields import FieldMetadataCache, cardinality_n
from .hydrator import RecordHydrator
from .paginator import Feed, Paginator, feed_url, next_page_url
from .resolver import AttributeResolver

__all__ = [
    "OpenRegisterClient",
    "default_client",
    "FieldMetadataCache",
    "cardinality_n",
    "RecordHydrator",
    "Feed",
    "Paginator",
    "feed_url",
    "next_page_url",
    "AttributeResolver",
]
