# phoenix/db.py
# MongoDB connection bootstrap and the process-wide application context

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Request
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from phoenix.config import DEFAULT_DB_NAME, Settings
from phoenix.logging_config import get_logger

_logger = get_logger(__name__)


@dataclass(frozen=True)
class AppContext:
    """
    Everything a request handler needs from the process: settings and the store.

    Built once at startup and attached to app.state; handlers receive it via
    the get_context dependency.
    """
    settings: Settings
    client: MongoClient
    db: Database

    @property
    def users(self) -> Collection:
        return self.db["users"]

    @property
    def assets(self) -> Collection:
        return self.db["assets"]

    @classmethod
    def from_client(cls, settings: Settings, client: MongoClient) -> "AppContext":
        ctx = cls(settings=settings, client=client, db=resolve_database(settings, client))
        ensure_indexes(ctx)
        return ctx

    def close(self) -> None:
        self.client.close()


def resolve_database(settings: Settings, client: MongoClient) -> Database:
    """MONGO_DB_NAME wins, then the database named in the URI path, then the default."""
    if settings.mongo_db_name:
        return client[settings.mongo_db_name]
    return client.get_default_database(default=DEFAULT_DB_NAME)


def ensure_indexes(ctx: AppContext) -> None:
    # Email uniqueness is the store's job, not the handler's
    ctx.users.create_index([("email", ASCENDING)], unique=True, name="uniq_email")
    ctx.assets.create_index([("lastUpdated", DESCENDING)], name="idx_last_updated")


def connect(settings: Settings) -> AppContext:
    """
    Open the client pool and verify the server answers.

    timeoutMS bounds every operation issued through this client, so a slow
    store fails a request instead of hanging it.

    Raises:
        pymongo.errors.PyMongoError: store unreachable or rejected the ping
    """
    client = MongoClient(
        settings.mongo_uri,
        timeoutMS=settings.store_timeout_ms,
        serverSelectionTimeoutMS=settings.store_timeout_ms,
        appname="cloudphoenix",
    )
    try:
        client.admin.command("ping")
        ctx = AppContext.from_client(settings, client)
    except Exception:
        client.close()
        raise

    _logger.info("db.connected", database=ctx.db.name)
    return ctx


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the context attached at startup."""
    return request.app.state.context


# ---------------------------------------------------------
# Document helpers
# ---------------------------------------------------------
def parse_object_id(value: str) -> Optional[ObjectId]:
    """Return an ObjectId, or None when value is not a well-formed id."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def now_utc() -> datetime:
    """
    Current UTC time as a naive datetime truncated to milliseconds.

    BSON dates carry millisecond precision; truncating here keeps the value a
    handler returns identical to the value the store hands back later.
    """
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def next_timestamp(previous: Optional[datetime]) -> datetime:
    """now_utc(), bumped past previous so successive updates strictly increase."""
    now = now_utc()
    if previous is not None and now <= previous:
        return previous + timedelta(milliseconds=1)
    return now
