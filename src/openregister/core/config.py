"""Client configuration.

Resolution order (highest priority first):
1. Programmatic (ClientSettings constructed in code)
2. Environment variables (OPENREGISTER_TIMEOUT, OPENREGISTER_PAGE_SIZE, ...)
3. Hardcoded defaults
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Literal, Mapping

from .environments import Environment


logger = logging.getLogger(__name__)


PRODUCTION_URL_TEMPLATE = "https://{register}.register.gov.uk/{path}"
PREVIEW_URL_TEMPLATE = "http://{register}.alpha.openregister.org/{path}"
DEFAULT_PAGE_SIZE = 100
DEFAULT_TIMEOUT_S = 30.0

FeedFormat = Literal["tsv", "json"]
FEED_FORMATS: tuple[str, ...] = ("tsv", "json")

_ENV_VARS: dict[str, str] = {
    "production_url": "OPENREGISTER_PRODUCTION_URL",
    "preview_url": "OPENREGISTER_PREVIEW_URL",
    "page_size": "OPENREGISTER_PAGE_SIZE",
    "timeout_s": "OPENREGISTER_TIMEOUT",
    "feed_format": "OPENREGISTER_FORMAT",
}


@dataclass(frozen=True)
class ClientSettings:
    """Where feeds live and how they are fetched.

    - `production_url` / `preview_url`: templates with `{register}` and `{path}` placeholders
    - `page_size`: rows per page; the default size is never sent on the wire
    - `timeout_s`: per-request timeout handed to the HTTP client
    - `feed_format`: feed suffix and decoder (`tsv` or `json`)
    """

    production_url: str = PRODUCTION_URL_TEMPLATE
    preview_url: str = PREVIEW_URL_TEMPLATE
    page_size: int = DEFAULT_PAGE_SIZE
    timeout_s: float = DEFAULT_TIMEOUT_S
    feed_format: FeedFormat = "tsv"

    def __post_init__(self) -> None:
        for name in ("production_url", "preview_url"):
            template = getattr(self, name)
            if "{register}" not in template or "{path}" not in template:
                raise ValueError(f"{name} must contain '{{register}}' and '{{path}}' placeholders, got {template!r}")
        if int(self.page_size) <= 0:
            raise ValueError(f"page_size must be a positive integer, got {self.page_size!r}")
        if not float(self.timeout_s) > 0:
            raise ValueError(f"timeout_s must be > 0, got {self.timeout_s!r}")
        if self.feed_format not in FEED_FORMATS:
            raise ValueError(f"feed_format must be one of {FEED_FORMATS}, got {self.feed_format!r}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> "ClientSettings":
        """Build settings from OPENREGISTER_* variables, then apply `overrides`."""
        env = os.environ if environ is None else environ
        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            raw = env.get(_ENV_VARS[f.name])
            if raw is None or not raw.strip():
                continue
            raw = raw.strip()
            if f.name == "page_size":
                kwargs[f.name] = int(raw)
            elif f.name == "timeout_s":
                kwargs[f.name] = float(raw)
            elif f.name == "feed_format":
                kwargs[f.name] = raw.lower()
            else:
                kwargs[f.name] = raw
            logger.debug("Using %s from %s", f.name, _ENV_VARS[f.name])
        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**kwargs)

    def url_for(self, path: str, register: str, environment: Environment | str | bool | None = None) -> str:
        env = Environment.from_any(environment)
        template = self.preview_url if env.is_preview else self.production_url
        return template.format(register=register, path=path)
