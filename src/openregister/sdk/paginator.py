from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

import httpx

from ..core.config import DEFAULT_PAGE_SIZE


logger = logging.getLogger(__name__)


PageHandler = Callable[[str], list[Any]]


@dataclass
class Feed:
    """Rows gathered from one feed URL (and its following pages).

    `found` is False when the first request answered 404; `rows` is then empty.
    """

    url: str
    rows: list[Any] = field(default_factory=list)
    found: bool = True
    pages: int = 0

    def __iter__(self) -> Iterator[Any]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, index: int) -> Any:
        return self.rows[index]


def feed_url(url: str, *, fmt: str = "tsv", page_size: int | None = None) -> str:
    """Append the format suffix and, for a non-default page size, the paging query."""
    out = f"{url}.{fmt}"
    if page_size is not None and int(page_size) != DEFAULT_PAGE_SIZE:
        out = f"{out}?page-index=1&page-size={int(page_size)}"
    return out


def next_page_url(url: str, response: httpx.Response) -> str | None:
    """Resolve the `next` link relation against `url` with its query dropped."""
    rel_next = response.links.get("next")
    if not rel_next or not rel_next.get("url"):
        return None
    return f"{url.split('?', 1)[0]}{rel_next['url']}"


class Paginator:
    """Sequential GETs over a paginated register feed.

    Each page body is handed to `handler` (usually a decoder) before the next
    page is requested. A 404 is logged and yields no rows; any other HTTP or
    transport failure propagates.
    """

    def __init__(self, http: httpx.Client) -> None:
        self.http = http

    def fetch_all(self, url: str, handler: PageHandler) -> Feed:
        return self._fetch(url, handler, follow=True)

    def fetch_one(self, url: str, handler: PageHandler) -> Feed:
        return self._fetch(url, handler, follow=False)

    def _fetch(self, url: str, handler: PageHandler, *, follow: bool) -> Feed:
        feed = Feed(url=url)
        next_url: str | None = url
        while next_url is not None:
            logger.debug("GET %s", next_url)
            res = self.http.get(next_url)
            if res.status_code == httpx.codes.NOT_FOUND:
                logger.warning("Not found: %s (%s)", next_url, res.status_code)
                if feed.pages == 0:
                    feed.found = False
                break
            res.raise_for_status()

            feed.rows.extend(handler(res.text))
            feed.pages += 1

            next_url = next_page_url(next_url, res) if follow else None
            if next_url is not None:
                logger.debug("Following next page %s", next_url)
        return feed
