from __future__ import annotations

from typing import Any

import pytest
from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.testclient import TestClient

from openregister import ClientSettings, OpenRegisterClient


PRODUCTION_SUFFIX = ".register.gov.uk"
PREVIEW_SUFFIX = ".alpha.openregister.org"


def _field(name: str, cardinality: str = "1", datatype: str = "string", register: str = "") -> dict[str, str]:
    return {
        "field": name,
        "cardinality": cardinality,
        "datatype": datatype,
        "register": register,
        "phase": "beta",
        "text": f"The {name} field",
    }


PRODUCTION_FIELDS = [
    _field("register", register="register"),
    _field("text", datatype="text"),
    _field("phase"),
    _field("registry"),
    _field("copyright", datatype="text"),
    _field("fields", cardinality="n", register="field"),
    _field("field", register="field"),
    _field("cardinality"),
    _field("datatype"),
    _field("country", register="country"),
    _field("name"),
    _field("official-name"),
    _field("citizen-names", cardinality="n"),
    _field("start-date", datatype="datetime"),
    _field("end-date", datatype="datetime"),
    _field("local-authority-eng", register="local-authority-eng"),
    _field("local-authority-type", register="local-authority-type"),
    _field("place", register="place"),
    _field("located-in", datatype="curie"),
    _field("nearby", cardinality="n"),
]

# The preview environment disagrees about `name` and `citizen-names`.
PREVIEW_FIELDS = [
    f
    for f in PRODUCTION_FIELDS
    if f["field"] not in ("name", "citizen-names")
] + [
    _field("name", cardinality="n"),
    _field("citizen-names"),
]


def _register(name: str, fields: list[str]) -> dict[str, str]:
    return {
        "register": name,
        "text": f"The {name} register",
        "phase": "beta",
        "registry": "government-digital-service",
        "fields": ";".join(fields),
        "copyright": "",
    }


REGISTERS = [
    _register("country", ["country", "name", "official-name", "citizen-names", "start-date", "end-date"]),
    _register("local-authority-eng", ["local-authority-eng", "name", "local-authority-type", "official-name"]),
    _register("local-authority-type", ["local-authority-type", "name"]),
    _register("place", ["place", "name", "located-in", "nearby"]),
    _register("field", ["field", "cardinality", "datatype", "register", "phase", "text"]),
    _register("register", ["register", "text", "phase", "registry", "fields", "copyright"]),
]

COUNTRIES = [
    {
        "country": "FR",
        "name": "France",
        "official-name": "The French Republic",
        "citizen-names": "French",
        "start-date": "",
        "end-date": "",
    },
    {
        "country": "DE",
        "name": "Germany",
        "official-name": "The Federal Republic of Germany",
        "citizen-names": "German",
        "start-date": "",
        "end-date": "",
    },
    {
        "country": "GB",
        "name": "United Kingdom",
        "official-name": "The United Kingdom of Great Britain and Northern Ireland",
        "citizen-names": "Briton;British citizen",
        "start-date": "",
        "end-date": "",
    },
    {
        "country": "CZ",
        "name": "Czechia",
        "official-name": "The Czech Republic",
        "citizen-names": "Czech",
        "start-date": "1993-01-01",
        "end-date": "",
    },
    {
        "country": "CS",
        "name": "Czechoslovakia",
        "official-name": "Czechoslovak Republic",
        "citizen-names": "Czechoslovak",
        "start-date": "",
        "end-date": "1992-12-31",
    },
]

LOCAL_AUTHORITIES = [
    {"local-authority-eng": "BIR", "name": "Birmingham", "local-authority-type": "MD", "official-name": "Birmingham City Council"},
    {"local-authority-eng": "LDS", "name": "Leeds", "local-authority-type": "MD", "official-name": "Leeds City Council"},
    {"local-authority-eng": "KEN", "name": "Kent", "local-authority-type": "CTY", "official-name": "Kent County Council"},
]

LOCAL_AUTHORITY_TYPES = [
    {"local-authority-type": "MD", "name": "Metropolitan district"},
    {"local-authority-type": "CTY", "name": "County"},
]

PLACES = [
    {"place": "paris", "name": "Paris", "located-in": "country:FR", "nearby": "versailles;orly"},
    {"place": "leeds", "name": "Leeds", "located-in": "local-authority-eng:LDS", "nearby": ""},
    {"place": "atlantis", "name": "Atlantis", "located-in": "country:AT", "nearby": ""},
    {"place": "nowhere", "name": "Nowhere", "located-in": "nowhere", "nearby": ""},
]


class FakeRegistry:
    """In-memory register service answering feed requests by host name."""

    def __init__(self) -> None:
        self.data: dict[tuple[str, str], list[dict[str, str]]] = {}
        self.requests: list[str] = []
        self.app = self._create_app()

    @classmethod
    def default(cls) -> "FakeRegistry":
        reg = cls()
        for env, fields in (("production", PRODUCTION_FIELDS), ("preview", PREVIEW_FIELDS)):
            reg.add(env, "register", REGISTERS)
            reg.add(env, "field", fields)
            reg.add(env, "country", COUNTRIES)
        reg.add("production", "local-authority-eng", LOCAL_AUTHORITIES)
        reg.add("production", "local-authority-type", LOCAL_AUTHORITY_TYPES)
        reg.add("production", "place", PLACES)
        return reg

    def add(self, env: str, register: str, rows: list[dict[str, str]]) -> None:
        out: list[dict[str, str]] = []
        for i, row in enumerate(rows, start=1):
            full = {
                "entry-number": str(i),
                "entry-timestamp": f"2016-04-05T13:23:{i:02d}Z",
                "item-hash": f"sha-256:{register}{i:04d}",
            }
            full.update(row)
            out.append(full)
        self.data[(env, register)] = out

    def count(self, fragment: str) -> int:
        return sum(1 for url in self.requests if fragment in url)

    @staticmethod
    def _locate(request: Request) -> tuple[str, str]:
        host = request.url.hostname or ""
        if host.endswith(PREVIEW_SUFFIX):
            return "preview", host[: -len(PREVIEW_SUFFIX)]
        if host.endswith(PRODUCTION_SUFFIX):
            return "production", host[: -len(PRODUCTION_SUFFIX)]
        raise HTTPException(status_code=404, detail=f"unknown host {host}")

    @staticmethod
    def _tsv(rows: list[dict[str, str]]) -> str:
        if not rows:
            return ""
        header = list(rows[0])
        lines = ["\t".join(header)]
        lines.extend("\t".join(r.get(h, "") for h in header) for r in rows)
        return "\n".join(lines) + "\n"

    def _create_app(self) -> FastAPI:
        app = FastAPI(title="fake-register")

        @app.get("/records.{fmt}")
        def records(fmt: str, request: Request) -> Response:
            self.requests.append(str(request.url))
            env, register = self._locate(request)
            rows = self.data.get((env, register))
            if rows is None or fmt != "tsv":
                raise HTTPException(status_code=404)

            index = int(request.query_params.get("page-index", 1))
            size = int(request.query_params.get("page-size", 100))
            page = rows[(index - 1) * size : index * size]

            links: list[str] = []
            if index > 1:
                links.append(f'<?page-index={index - 1}&page-size={size}>; rel="previous"')
            if index * size < len(rows):
                links.append(f'<?page-index={index + 1}&page-size={size}>; rel="next"')
            headers: dict[str, Any] = {"Link": ", ".join(links)} if links else {}
            return Response(content=self._tsv(page), media_type="text/tab-separated-values", headers=headers)

        @app.get("/record/{key}.{fmt}")
        def record(key: str, fmt: str, request: Request) -> Response:
            self.requests.append(str(request.url))
            env, register = self._locate(request)
            rows = self.data.get((env, register)) or []
            match = [r for r in rows if r.get(register) == key]
            if not match or fmt != "tsv":
                raise HTTPException(status_code=404)
            return Response(content=self._tsv(match), media_type="text/tab-separated-values")

        return app


@pytest.fixture
def registry() -> FakeRegistry:
    return FakeRegistry.default()


@pytest.fixture
def http(registry: FakeRegistry) -> TestClient:
    return TestClient(registry.app)


@pytest.fixture
def client(http: TestClient) -> OpenRegisterClient:
    return OpenRegisterClient(ClientSettings(), http=http)
