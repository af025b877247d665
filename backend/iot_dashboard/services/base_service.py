"""
CRUD Service Base
=================

Every resource (users, sensors, measures) gets the same five operations:

    list(query=None)         -> [document]
    get_by_id(id)            -> document        NotFoundError / InvalidIdError
    create(payload)          -> document        ValidationError
    update(id, payload)      -> document        NotFoundError / ValidationError
    delete(id)               -> document        NotFoundError

Documents go in and out as plain dicts: ``_id`` and foreign keys as strings,
datetimes as UTC-aware datetimes (see ``serialize_document``).

Payloads can be either the resource's pydantic model (what the routers pass)
or a plain dict (validated here, handy for scripts and tests).

Subclasses set the collection name, the request models, and hook into
``prepare_create`` / ``prepare_update`` for resource-specific rules.

ATOMICITY:
    Each call touches exactly one document, so each call is atomic on its own.
    There is no multi-document transaction: a client that reads a user, then
    its sensors, then their measures can see a mix of states if someone writes
    in between. That is accepted for an admin dashboard.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Type, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pymongo import ReturnDocument
from pymongo.database import Database

from iot_dashboard.exceptions import NotFoundError, ValidationError
from iot_dashboard.services.database import store_errors
from iot_dashboard.utils.documents import serialize_document
from iot_dashboard.utils.validation import to_object_id

logger = logging.getLogger(__name__)


Payload = Union[BaseModel, dict]


def format_validation_error(error) -> str:
    """Flatten pydantic (or FastAPI request) validation errors into one readable line."""
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ()) if p != "body")
        message = item.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid payload"


def utc_now() -> datetime:
    # Mongo stores millisecond precision, keep what we return identical to what we store
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


class CrudService:
    """
    Generic CRUD over one MongoDB collection.
    """

    collection_name: str = ""
    resource_name: str = "document"
    create_model: Type[BaseModel] = BaseModel
    update_model: Type[BaseModel] = BaseModel
    timestamps: bool = True

    def __init__(self, database: Database):
        self.collection = database[self.collection_name]

    # =========================================================================
    # HOOKS
    # =========================================================================

    def prepare_create(self, data: dict) -> dict:
        """Turn validated create data into the document to insert."""
        return data

    def prepare_update(self, changes: dict) -> dict:
        """Turn validated update fields into the ``$set`` document."""
        return changes

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _validate(self, payload: Payload, model: Type[BaseModel]) -> BaseModel:
        if isinstance(payload, model):
            return payload
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(exclude_unset=True)
        try:
            return model.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(format_validation_error(e))

    def _not_found(self) -> NotFoundError:
        return NotFoundError(f"{self.resource_name.capitalize()} not found")

    def _object_id(self, document_id: Any):
        return to_object_id(document_id, self.resource_name)

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def list(self, query: Optional[dict] = None) -> list[dict]:
        """Return every document, or those matching ``query``."""
        with store_errors(f"list {self.collection_name}"):
            documents = list(self.collection.find(query or {}))
        return [serialize_document(d) for d in documents]

    def get_by_id(self, document_id: Any) -> dict:
        object_id = self._object_id(document_id)
        with store_errors(f"get {self.resource_name}"):
            document = self.collection.find_one({"_id": object_id})
        if document is None:
            raise self._not_found()
        return serialize_document(document)

    def exists(self, document_id: Any) -> bool:
        """True if a document with that id is stored. Malformed ids are simply absent."""
        try:
            object_id = self._object_id(document_id)
        except NotFoundError:
            return False
        with store_errors(f"check {self.resource_name}"):
            return self.collection.count_documents({"_id": object_id}, limit=1) > 0

    def create(self, payload: Payload) -> dict:
        """
        Insert a new document and return it with its assigned ``_id``.

        Raises:
            ValidationError: If required fields are missing or mistyped
        """
        validated = self._validate(payload, self.create_model)
        document = self.prepare_create(validated.model_dump(exclude_none=True))
        if self.timestamps:
            now = utc_now()
            document["createdAt"] = now
            document["updatedAt"] = now

        with store_errors(f"create {self.resource_name}"):
            result = self.collection.insert_one(document)
        document["_id"] = result.inserted_id

        logger.info(f"Created {self.resource_name} {result.inserted_id}")
        return serialize_document(document)

    def update(self, document_id: Any, payload: Payload) -> dict:
        """
        Apply a partial update; fields not in ``payload`` keep their value.

        Explicit nulls are ignored, a required field cannot be cleared.
        """
        object_id = self._object_id(document_id)
        validated = self._validate(payload, self.update_model)
        changes = self.prepare_update(
            validated.model_dump(exclude_unset=True, exclude_none=True)
        )
        if self.timestamps:
            changes["updatedAt"] = utc_now()

        if not changes:
            # Nothing to write, but the caller still gets NotFound for a missing id
            return self.get_by_id(object_id)

        with store_errors(f"update {self.resource_name}"):
            document = self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        if document is None:
            raise self._not_found()

        logger.info(f"Updated {self.resource_name} {object_id}: {sorted(changes)}")
        return serialize_document(document)

    def delete(self, document_id: Any) -> dict:
        """
        Remove a document and return it as it was just before deletion.

        No cascade: sensors of a deleted user (and measures of a deleted
        sensor) stay in place with a dangling reference.
        """
        object_id = self._object_id(document_id)
        with store_errors(f"delete {self.resource_name}"):
            document = self.collection.find_one_and_delete({"_id": object_id})
        if document is None:
            raise self._not_found()

        logger.info(f"Deleted {self.resource_name} {object_id}")
        return serialize_document(document)
