"""Seed helper that loads sample campus documents into MongoDB.

The seed file is MongoDB extended JSON so ids, references and dates are
stored with their BSON types (``{"$oid": ...}``, ``{"$date": ...}``).
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List

from bson import json_util
from pymongo import MongoClient
from pymongo.errors import PyMongoError

ROOT_DIR = Path(__file__).resolve().parent.parent
BACKEND_DIR = ROOT_DIR / "backend"
SEED_PATH = Path(__file__).resolve().parent / "seed.json"

if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from campus import resources  # noqa: E402
from campus.config import ConfigError, get_db_name, get_mongo_uri  # noqa: E402
from campus.crud import Resource  # noqa: E402
from campus.db import get_collection, use_db  # noqa: E402

UNIQUE_FIELDS = {
    resource.collection: resource.unique
    for resource in vars(resources).values()
    if isinstance(resource, Resource)
}


def read_seed_file(path: Path = SEED_PATH) -> Dict[str, List[Dict[str, Any]]]:
    with path.open("r", encoding="utf-8") as seed_file:
        data = json_util.loads(seed_file.read())
    if not isinstance(data, dict):
        raise ValueError("Seed file must contain an object of collections")
    return data


def main() -> None:
    try:
        uri = get_mongo_uri()
        db_name = get_db_name()
    except ConfigError as exc:  # pragma: no cover - simple CLI utility
        print(f"Configuration error: {exc}")
        raise SystemExit(1)

    client = MongoClient(uri, serverSelectionTimeoutMS=5000)
    use_db(client[db_name])

    try:
        seed_data = read_seed_file()

        for collection_name, documents in seed_data.items():
            if not isinstance(documents, list):
                raise ValueError(
                    f"Seed data for collection '{collection_name}' must be a list"
                )

            collection = get_collection(collection_name, UNIQUE_FIELDS.get(collection_name, ()))
            collection.delete_many({})
            if documents:
                collection.insert_many(documents)

            print(
                f"Loaded {len(documents)} document(s) into '{collection_name}' collection"
            )

        print(f"Seeding complete for database '{db_name}'.")
    except PyMongoError as exc:  # pragma: no cover - requires Mongo connection
        print(f"MongoDB error: {exc}")
        raise SystemExit(1)
    finally:
        client.close()


if __name__ == "__main__":
    main()
