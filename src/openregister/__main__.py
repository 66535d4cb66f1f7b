from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Iterable

from .core.config import ClientSettings
from .core.environments import Environment
from .core.records import Record
from .sdk.client import OpenRegisterClient


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ";".join(str(v) for v in value)
    return str(value)


def _emit(records: Iterable[Record], *, as_json: bool) -> None:
    header: list[str] | None = None
    for rec in records:
        data = rec.to_dict()
        if as_json:
            print(json.dumps(data, default=str))
            continue
        if header is None:
            header = list(data)
            print("\t".join(h.replace("_", "-") for h in header))
        print("\t".join(_cell(data.get(h)) for h in header))


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="openregister", description="openregister: read registers and records")
    p.add_argument("--preview", action="store_true", help="use the alpha/preview environment")
    p.add_argument("--json", action="store_true", help="emit JSON lines instead of TSV")
    p.add_argument("--timeout", type=float, default=None, help="per-request timeout in seconds")
    p.add_argument("-v", "--verbose", action="store_true")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("registers", help="list all registers")

    p_records = sub.add_parser("records", help="list records of a register")
    p_records.add_argument("register")
    p_records.add_argument("--all", action="store_true", help="follow every page")
    p_records.add_argument("--page-size", type=int, default=None)

    p_record = sub.add_parser("record", help="show one record")
    p_record.add_argument("register")
    p_record.add_argument("key")

    p_field = sub.add_parser("field", help="show a field definition")
    p_field.add_argument("name")

    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = ClientSettings.from_env(timeout_s=args.timeout)
    env = Environment.PREVIEW if args.preview else Environment.PRODUCTION

    with OpenRegisterClient(settings) as client:
        if args.command == "registers":
            _emit(client.registers(env), as_json=args.json)
        elif args.command == "records":
            _emit(
                client.records_for(args.register, env, all=args.all, page_size=args.page_size),
                as_json=args.json,
            )
        elif args.command == "record":
            rec = client.record(args.register, args.key, env)
            if rec is None:
                print(f"No record {args.key!r} in register {args.register!r}", file=sys.stderr)
                return 1
            _emit([rec], as_json=args.json)
        elif args.command == "field":
            fld = client.field(args.name, env)
            if fld is None:
                print(f"No field {args.name!r}", file=sys.stderr)
                return 1
            _emit([fld], as_json=args.json)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
