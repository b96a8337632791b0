"""Generic create/list/patch handlers shared by every campus resource."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Type, TypeVar, Union

from flask import Blueprint, jsonify, request
from bson.errors import BSONError
from pydantic import BaseModel, ValidationError
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from .broadcast import Broadcaster, NullBroadcaster
from .db import get_collection, get_db, parse_object_id, serialize_document, utcnow
from .errors import BadRequest, NotFound, ServerError
from .schemas import Changes, Document
from .utils.filters import FilterParamError, parse_filter_params

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)

# Errors raised while encoding or storing a document; BSON encoding
# failures (e.g. integers wider than 64 bits) are not PyMongoErrors.
_STORAGE_ERRORS = (PyMongoError, BSONError, OverflowError)


@dataclass(frozen=True)
class Resource:
    """Static description of one document collection."""

    name: str
    collection: str
    schema: Type[Document]
    timestamp_field: str = "createdAt"
    populate: Tuple[str, ...] = ()
    unique: Tuple[Union[str, Tuple[str, ...]], ...] = ()
    event: str | None = None


def _format_validation_error(name: str, exc: ValidationError) -> Tuple[str, Dict[str, str]]:
    details: Dict[str, str] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "_global"
        details.setdefault(field, error["msg"])

    parts = [
        message if field == "_global" else f"{field}: {message}"
        for field, message in details.items()
    ]
    return f"{name} validation failed: " + ", ".join(parts), details


def validate_payload(model: Type[_M], payload: Any, name: str) -> _M:
    """Validate a request body against ``model`` or raise BadRequest."""

    if payload is None:
        raise BadRequest("Request body must be JSON.")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        message, details = _format_validation_error(name, exc)
        raise BadRequest(message, details) from None


def _duplicate_key_error(exc: DuplicateKeyError) -> BadRequest:
    key_pattern = (exc.details or {}).get("keyPattern") or {}
    field = ", ".join(key_pattern)
    if not field:
        return BadRequest(str(exc))
    return BadRequest(f"Duplicate value for field: {field}", {field: "Value already in use."})


class ResourceCrud:
    """Create, list and patch handlers for a single resource.

    Each operation performs one persistence call. Creates of resources that
    declare an ``event`` are announced on the injected broadcaster after the
    insert succeeds.
    """

    def __init__(self, resource: Resource, broadcaster: Broadcaster | None = None):
        self.resource = resource
        self.broadcaster = broadcaster or NullBroadcaster()

    @property
    def collection(self) -> Collection:
        return get_collection(self.resource.collection, self.resource.unique)

    def create(self, payload: Any) -> Dict[str, Any]:
        model = validate_payload(self.resource.schema, payload, self.resource.name)
        document = model.to_document()
        document[self.resource.timestamp_field] = utcnow()

        try:
            self.collection.insert_one(document)
        except DuplicateKeyError as exc:
            logger.info("Duplicate key while creating %s: %s", self.resource.name, exc)
            raise _duplicate_key_error(exc) from None
        except _STORAGE_ERRORS as exc:
            logger.exception("Failed to create %s", self.resource.name)
            raise BadRequest(str(exc)) from None

        created = serialize_document(document)
        if self.resource.event:
            self.broadcaster.publish(self.resource.event, created)
        return created

    def list(self, filters: Mapping[str, Any] | None = None) -> List[Dict[str, Any]]:
        try:
            documents = list(self.collection.find(dict(filters or {})))
            self._populate(documents)
        except PyMongoError as exc:
            logger.exception("Failed to list %s", self.resource.name)
            raise ServerError(str(exc)) from None
        return [serialize_document(document) for document in documents]

    def get(self, document_id: Any) -> Dict[str, Any]:
        object_id = parse_object_id(document_id)
        try:
            document = self.collection.find_one({"_id": object_id})
        except PyMongoError as exc:
            logger.exception("Failed to load %s", self.resource.name)
            raise BadRequest(str(exc)) from None
        if document is None:
            raise NotFound(f"{self.resource.name} not found.")
        return serialize_document(document)

    def patch(
        self,
        document_id: Any,
        changes: Mapping[str, Any],
        *,
        operator: str = "$set",
    ) -> Dict[str, Any]:
        """Apply ``changes`` to one document and return it; NotFound if absent."""

        object_id = parse_object_id(document_id)
        updated = self._find_and_update({"_id": object_id}, changes, operator)
        if updated is None:
            raise NotFound(f"{self.resource.name} not found.")
        return serialize_document(updated)

    def patch_if(
        self,
        document_id: Any,
        changes: Mapping[str, Any],
        match: Mapping[str, Any],
    ) -> Dict[str, Any] | None:
        """Set ``changes`` only while the document also satisfies ``match``.

        Returns ``None`` when the document exists but does not match. A
        missing document raises NotFound.
        """

        object_id = parse_object_id(document_id)
        updated = self._find_and_update({**match, "_id": object_id}, changes, "$set")
        if updated is not None:
            return serialize_document(updated)

        try:
            existing = self.collection.find_one({"_id": object_id}, {"_id": 1})
        except PyMongoError as exc:
            logger.exception("Failed to load %s", self.resource.name)
            raise BadRequest(str(exc)) from None
        if existing is None:
            raise NotFound(f"{self.resource.name} not found.")
        return None

    def _find_and_update(
        self, query: Mapping[str, Any], changes: Mapping[str, Any], operator: str
    ) -> Dict[str, Any] | None:
        if not changes:
            raise BadRequest("No changes supplied.")
        try:
            return self.collection.find_one_and_update(
                dict(query),
                {operator: dict(changes)},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as exc:
            raise _duplicate_key_error(exc) from None
        except _STORAGE_ERRORS as exc:
            logger.exception("Failed to update %s", self.resource.name)
            raise BadRequest(str(exc)) from None

    def apply(self, document_id: Any, model: Type[Changes], payload: Any) -> Dict[str, Any]:
        """Validate a patch body with ``model`` and overwrite those fields."""

        changes = validate_payload(model, payload, self.resource.name)
        return self.patch(document_id, changes.to_update())

    def review(
        self,
        document_id: Any,
        model: Type[Changes],
        payload: Any,
        *,
        pending: str = "pending",
        extra: Mapping[str, Any] | None = None,
    ) -> Dict[str, Any]:
        """Move a document out of ``pending`` into the decision in ``payload``.

        The transition is one-way. Repeating the decision already recorded
        returns the document unchanged; asking for a different decision on
        a reviewed document is rejected.
        """

        changes = validate_payload(model, payload, self.resource.name).to_update()
        if extra:
            changes.update(extra)

        updated = self.patch_if(document_id, changes, {"status": pending})
        if updated is not None:
            return updated

        current = self.get(document_id)
        if current.get("status") == changes["status"]:
            return current
        raise BadRequest(
            f"{self.resource.name} has already been {str(current.get('status')).lower()}."
        )

    def _populate(self, documents: List[Dict[str, Any]]) -> None:
        references = self.resource.schema.references
        for field in self.resource.populate:
            target = references.get(field)
            if not target:
                continue

            ids = set()
            for document in documents:
                value = document.get(field)
                if isinstance(value, list):
                    ids.update(value)
                elif value is not None:
                    ids.add(value)
            if not ids:
                continue

            found = {
                doc["_id"]: doc
                for doc in get_db()[target].find({"_id": {"$in": list(ids)}})
            }
            for document in documents:
                value = document.get(field)
                if isinstance(value, list):
                    document[field] = [found[item] for item in value if item in found]
                elif value is not None:
                    document[field] = found.get(value)


def register_resource(
    blueprint: Blueprint,
    crud: ResourceCrud,
    path: str,
    *,
    filters: Iterable[str] = (),
) -> None:
    """Install ``POST path`` and ``GET path`` for ``crud`` on ``blueprint``."""

    allowed = tuple(filters)
    references = tuple(crud.resource.schema.references)
    endpoint = crud.resource.collection

    def create_view():
        created = crud.create(request.get_json(silent=True))
        return jsonify(created), 201

    def list_view():
        try:
            query = parse_filter_params(
                request.args, allowed_fields=allowed, reference_fields=references
            )
        except FilterParamError as exc:
            raise BadRequest(str(exc)) from None
        return jsonify(crud.list(query))

    blueprint.add_url_rule(
        path, endpoint=f"create_{endpoint}", view_func=create_view, methods=["POST"]
    )
    blueprint.add_url_rule(
        path, endpoint=f"list_{endpoint}", view_func=list_view, methods=["GET"]
    )


__all__ = ["Resource", "ResourceCrud", "register_resource", "validate_payload"]
