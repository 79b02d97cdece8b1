from urllib.parse import urlparse

import mongomock
from pymongo import MongoClient, ASCENDING
from pymongo.database import Database

DEFAULT_DB_NAME = "rpg_backend"


def _db_name_from_uri(uri: str) -> str:
    u = urlparse(uri or "")
    return (u.path or "").lstrip("/")


class MongoContext:
    """Owns the Mongo client for one application instance.

    Built from settings at startup, opened once, handed to whoever needs a
    collection, closed on shutdown.
    """

    def __init__(self, uri: str, db_name: str | None = None):
        if not uri or "xxxx.mongodb.net" in uri or "example.com" in uri:
            raise RuntimeError("MONGODB_URI is missing or still a placeholder.")
        self.uri = uri
        self.db_name = db_name or _db_name_from_uri(uri) or DEFAULT_DB_NAME
        self._client = None

    @classmethod
    def from_settings(cls, settings) -> "MongoContext":
        return cls(settings.mongodb_uri, settings.db_name)

    @property
    def is_mock(self) -> bool:
        return self.uri.startswith("mongomock://")

    def open(self) -> "MongoContext":
        if self._client is None:
            self._client = mongomock.MongoClient() if self.is_mock else MongoClient(self.uri)
        return self

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self.open()

    def __exit__(self, *exc):
        self.close()

    @property
    def db(self) -> Database:
        if self._client is None:
            raise RuntimeError("MongoContext is not open")
        return self._client[self.db_name]

    def col(self, name: str):
        return self.db[name]

    def ensure_indexes(self) -> None:
        db = self.db
        db.characters.create_index("id", unique=True)
        db.monsters.create_index("id", unique=True)
        db.inventory.create_index("id", unique=True)
        db.inventory.create_index([("kind", ASCENDING)])
