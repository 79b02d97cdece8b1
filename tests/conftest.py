import os

import pytest

os.environ.setdefault("CORS_ORIGINS", "http://localhost")
os.environ.setdefault("MONGODB_URI", "mongomock://localhost")
os.environ.setdefault("DB_NAME", "rpg_test")

from server.src.modules.game_store import GameStore
from tests.helpers import MONGO


@pytest.fixture(autouse=True)
def clean_state():
    db = MONGO.db
    for name in db.list_collection_names():
        db.drop_collection(name)
    MONGO.ensure_indexes()
    yield


@pytest.fixture
def store() -> GameStore:
    return GameStore(MONGO)
