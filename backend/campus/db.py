"""MongoDB helpers for the application."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, Set

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from .config import get_db_name, get_mongo_uri
from .errors import BadRequest

_MONGO_CLIENT = None
_MONGO_DB = None

# Collections whose unique indexes have been created on the current database.
_INDEXED_COLLECTIONS: Set[str] = set()


def _get_client():
    """Create (or reuse) a MongoDB client using the configured URI."""

    global _MONGO_CLIENT

    if _MONGO_CLIENT is None:
        _MONGO_CLIENT = MongoClient(get_mongo_uri(), serverSelectionTimeoutMS=5000)
    return _MONGO_CLIENT


def get_db() -> Database:
    """Return the application's MongoDB database instance."""

    global _MONGO_DB

    if _MONGO_DB is None:
        _MONGO_DB = _get_client()[get_db_name()]
    return _MONGO_DB


def use_db(database: Database) -> None:
    """Point every collection helper at an already opened database."""

    global _MONGO_DB

    _MONGO_DB = database
    _INDEXED_COLLECTIONS.clear()


def _ensure_unique_indexes(collection: Collection, fields: Iterable[Any]) -> None:
    fields = tuple(fields)
    if not fields or collection.name in _INDEXED_COLLECTIONS:
        return

    for field in fields:
        # A tuple entry is one compound key.
        keys = (field,) if isinstance(field, str) else tuple(field)
        # Sparse so optional unique fields (e.g. isbn) may be left out.
        collection.create_index(
            [(key, ASCENDING) for key in keys],
            unique=True,
            sparse=True,
            name="unique_" + "_".join(keys),
        )
    _INDEXED_COLLECTIONS.add(collection.name)


def get_collection(name: str, unique: Iterable[Any] = ()) -> Collection:
    """Return a collection, creating its unique indexes on first use."""

    collection = get_db()[name]
    _ensure_unique_indexes(collection, unique)
    return collection


def utcnow() -> datetime:
    """Naive UTC timestamp, the form MongoDB hands back."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_object_id(value: Any, field: str = "_id") -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise BadRequest(f"Invalid {field}: {value}") from None


def to_object_ids(value: Any) -> Any:
    """Convert a reference (or list of references) to ObjectIds."""

    if isinstance(value, list):
        return [parse_object_id(item) for item in value]
    if value is None:
        return None
    return parse_object_id(value)


def _format_datetime(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"


def serialize_document(value: Any) -> Any:
    """Convert a raw Mongo document into a JSON-serialisable structure."""

    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return _format_datetime(value)
    if isinstance(value, dict):
        return {key: serialize_document(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_document(item) for item in value]
    return value


__all__ = [
    "get_collection",
    "get_db",
    "parse_object_id",
    "serialize_document",
    "to_object_ids",
    "use_db",
    "utcnow",
]
