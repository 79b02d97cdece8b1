from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterable

from pymongo import UpdateOne
from pymongo.errors import PyMongoError

from db_mongo import MongoContext
from server.src.modules.errors import UpstreamFailure
from server.src.modules.logging_helpers import logger

CHARACTERS_COL = "characters"
MONSTERS_COL = "monsters"
INVENTORY_COL = "inventory"
AUDIT_COL = "audit_logs"


@contextmanager
def _store_call(collection: str, operation: str):
    try:
        yield
    except PyMongoError as exc:
        logger.exception("%s %s failed", collection, operation)
        raise UpstreamFailure(f"Database error during {operation} on {collection}.") from exc


class DocumentStore:
    """Documents keyed by a string `id`; Mongo's `_id` never leaves the store."""

    def __init__(self, collection):
        self.collection = collection
        self.name = collection.name

    def find_by_id(self, doc_id: str) -> dict[str, Any] | None:
        with _store_call(self.name, "find_by_id"):
            return self.collection.find_one({"id": str(doc_id)}, {"_id": 0})

    def find(self, filter: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        with _store_call(self.name, "find"):
            return list(self.collection.find(filter or {}, {"_id": 0}))

    def find_many(self, ids: Iterable[str]) -> list[dict[str, Any]]:
        wanted = list(dict.fromkeys(str(i) for i in ids))
        if not wanted:
            return []
        return self.find({"id": {"$in": wanted}})

    def save(self, doc: dict[str, Any]) -> int:
        body = {k: v for k, v in doc.items() if k != "_id"}
        with _store_call(self.name, "save"):
            result = self.collection.update_one({"id": body["id"]}, {"$set": body})
        return result.modified_count

    def set_fields(self, doc_id: str, fields: dict[str, Any]) -> int:
        """$set only the given (dotted) paths on one document."""
        with _store_call(self.name, "set_fields"):
            result = self.collection.update_one({"id": str(doc_id)}, {"$set": fields})
        return result.modified_count

    def insert(self, doc: dict[str, Any]) -> None:
        with _store_call(self.name, "insert"):
            self.collection.insert_one(dict(doc))

    def bulk_apply(self, ops: list[UpdateOne]) -> int:
        if not ops:
            return 0
        with _store_call(self.name, "bulk_apply"):
            result = self.collection.bulk_write(ops, ordered=False)
        return result.modified_count


class GameStore:
    def __init__(self, ctx: MongoContext):
        self.characters = DocumentStore(ctx.col(CHARACTERS_COL))
        self.monsters = DocumentStore(ctx.col(MONSTERS_COL))
        self.inventory = DocumentStore(ctx.col(INVENTORY_COL))
        self.audit_logs = DocumentStore(ctx.col(AUDIT_COL))
