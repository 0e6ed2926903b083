#!/usr/bin/env python3
"""
Seed script for the geocode_cities / geocode_countries collections.

Reads a JSON file shaped like:

    {
      "cities": [{"code": "75056", "value": "Paris", "codeZone": "75",
                  "validityStart": "1943-01-01", "validityEnd": null}],
      "countries": [{"code": "99100", "value": "France",
                     "validityStart": "1943-01-01", "validityEnd": null}]
    }

Existing documents are replaced. Records are validated with the API schemas
before being written, so the API serves exactly what was seeded.
"""

import argparse
import asyncio
import json
import os
import sys
from datetime import date, datetime, time
from pathlib import Path
from typing import Optional

# Make app package importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import get_settings
from app.core.database import CITIES_COLLECTION, COUNTRIES_COLLECTION, get_client
from app.geocodes.schemas import City, Country


def _as_datetime(value: Optional[date]) -> Optional[datetime]:
    # BSON has no date type
    return datetime.combine(value, time.min) if value else None


def city_document(record: dict) -> dict:
    city = City.model_validate(record)
    return {
        "code": city.code,
        "value": city.value,
        "code_zone": city.code_zone,
        "value_lower": (city.value or "").lower(),
        "validity_start": _as_datetime(city.validity_start),
        "validity_end": _as_datetime(city.validity_end),
    }


def country_document(record: dict) -> dict:
    country = Country.model_validate(record)
    return {
        "code": country.code,
        "value": country.value,
        "value_lower": (country.value or "").lower(),
        "validity_start": _as_datetime(country.validity_start),
        "validity_end": _as_datetime(country.validity_end),
    }


async def seed_geocodes(json_path: Path):
    settings = get_settings()
    client = get_client(settings.MONGO_URI)
    db = client[settings.MONGO_DB_NAME]

    if not json_path.exists():
        raise FileNotFoundError(f"JSON not found at {json_path}")
    data = json.loads(json_path.read_text(encoding="utf-8"))

    batches = [
        (CITIES_COLLECTION, [city_document(r) for r in data.get("cities", [])]),
        (COUNTRIES_COLLECTION, [country_document(r) for r in data.get("countries", [])]),
    ]

    for name, docs in batches:
        collection = db[name]
        # Replace existing data
        await collection.delete_many({})
        if docs:
            await collection.insert_many(docs)
        await collection.create_index("code")
        await collection.create_index("value_lower")
        await collection.create_index([("validity_start", 1), ("validity_end", 1)])
        print(f"Seeded {len(docs)} documents into {name}")

    client.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed geocode reference data into MongoDB")
    parser.add_argument(
        "json_path",
        nargs="?",
        default=str(Path(__file__).resolve().parent.parent / "geocodes.json"),
        help="Path to the JSON file with cities and countries",
    )
    args = parser.parse_args()
    asyncio.run(seed_geocodes(Path(args.json_path)))
