"""
MongoDB access helpers.

``connect`` builds the client once at startup; the resulting ``Database`` is
stored on ``app.state`` and handed to repositories through a dependency, so
nothing here holds a module-level connection.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional, Union

from bson.objectid import ObjectId
from pydantic import BaseModel
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult
from pymongo.server_api import ServerApi

from config import Settings
from errors import ValidationFailure

logger = logging.getLogger(__name__)


def connect(settings: Settings) -> Database:
    client = MongoClient(settings.database_url, server_api=ServerApi("1"))
    return client[settings.database_name]


def ping(db: Database) -> bool:
    db.client.admin.command("ping")
    logger.info("Pinged MongoDB deployment, database %s is reachable", db.name)
    return True


def oid(value: str) -> ObjectId:
    """Parse a path/body identifier, rejecting malformed ones with a 400."""
    if isinstance(value, ObjectId):
        return value
    if not ObjectId.is_valid(value):
        raise ValidationFailure("invalid id format")
    return ObjectId(value)


def create_document(db: Database, collection_name: str, data: Union[BaseModel, dict]) -> InsertOneResult:
    if isinstance(data, BaseModel):
        data = data.model_dump()
    doc = dict(data)
    now = datetime.now(timezone.utc)
    doc.setdefault("created_at", now)
    doc["updated_at"] = now
    return db[collection_name].insert_one(doc)


def _public(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _public(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_public(v) for v in value]
    return value


def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    if not doc:
        return doc
    return _public(dict(doc))


# ----------------------- Result shapes -----------------------
def insert_result(res: InsertOneResult) -> dict:
    return {"acknowledged": res.acknowledged, "insertedId": str(res.inserted_id)}


def update_result(res: UpdateResult) -> dict:
    return {
        "acknowledged": res.acknowledged,
        "matchedCount": res.matched_count,
        "modifiedCount": res.modified_count,
    }


def delete_result(res: DeleteResult) -> dict:
    return {"acknowledged": res.acknowledged, "deletedCount": res.deleted_count}
