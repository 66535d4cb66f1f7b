import logging

import openregister


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    with openregister.OpenRegisterClient() as client:
        country = client.register("country")
        if country is None:
            raise SystemExit("country register not found")
        print("fields:", country.fields)

        for rec in country.all_records(page_size=50)[:10]:
            print(rec.country, rec.name, rec.citizen_names)

        la = client.record("local-authority-eng", "LDS")
        if la is not None:
            kind = la.related("local_authority_type")
            print(la.name, "->", kind.name if kind is not None else "?")

        # Same field name, possibly different definition.
        print(client.field("name"), client.field("name", openregister.Environment.PREVIEW))


if __name__ == "__main__":
    main()
