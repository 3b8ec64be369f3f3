"""
phoenix/routes_assets.py

Asset CRUD endpoints.

Guarantees:
- All endpoints require a valid token (router-level require_auth_context)
- createdBy comes from the token, never from the request body
- Updates are partial: only keys present in the body are written
- lastUpdated is refreshed on every successful update and strictly increases
- Input validation via Pydantic schemas
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from bson import ObjectId
from fastapi import APIRouter, Depends, Path
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from phoenix.auth_context import AuthContext, require_auth_context
from phoenix.db import AppContext, get_context, next_timestamp, parse_object_id
from phoenix.errors import InternalError, NotFound
from phoenix.logging_config import get_logger
from phoenix.models import Asset
from phoenix.schemas_assets import (
    AssetCreateRequest,
    AssetDeleteResponse,
    AssetResponse,
    AssetUpdateRequest,
)

_logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/assets",
    tags=["assets"],
    dependencies=[Depends(require_auth_context)],
)

# Only these user fields are ever attached to an asset
CREATOR_PROJECTION = {"name": 1, "email": 1}


def _creator_map(ctx: AppContext, docs: Iterable[Dict[str, Any]]) -> Dict[ObjectId, Dict[str, Any]]:
    creator_ids = {doc["createdBy"] for doc in docs if isinstance(doc.get("createdBy"), ObjectId)}
    if not creator_ids:
        return {}
    users = ctx.users.find({"_id": {"$in": list(creator_ids)}}, CREATOR_PROJECTION)
    return {u["_id"]: u for u in users}


def _to_response(doc: Dict[str, Any], creators: Dict[ObjectId, Dict[str, Any]]) -> AssetResponse:
    data = dict(doc)
    data["_id"] = str(doc["_id"])
    creator = creators.get(doc.get("createdBy"))
    data["createdBy"] = (
        {"_id": str(creator["_id"]), "name": creator.get("name", ""), "email": creator.get("email", "")}
        if creator
        else None
    )
    return AssetResponse.model_validate(data)


def _expand(ctx: AppContext, docs: List[Dict[str, Any]]) -> List[AssetResponse]:
    creators = _creator_map(ctx, docs)
    return [_to_response(doc, creators) for doc in docs]


def _require_oid(asset_id: str) -> ObjectId:
    # A malformed id can't name an existing asset
    oid = parse_object_id(asset_id)
    if oid is None:
        raise NotFound("Asset not found")
    return oid


@router.post("", response_model=AssetResponse)
def create_asset(
    request: AssetCreateRequest,
    auth: AuthContext = Depends(require_auth_context),
    ctx: AppContext = Depends(get_context),
) -> AssetResponse:
    """
    Create a new asset owned by the caller.

    Raises:
        ValidationError(400): name, ipAddress or type missing/blank (schema)
        NotFound(404): the token's user no longer exists
        InternalError(500): store failure
    """
    creator_id = parse_object_id(auth.user_id)

    try:
        creator = ctx.users.find_one({"_id": creator_id}, CREATOR_PROJECTION) if creator_id else None
        if creator is None:
            _logger.info("assets.create_unknown_user", user_id=auth.user_id)
            raise NotFound("User not found")

        now = next_timestamp(None)
        asset = Asset(
            **request.model_dump(),
            createdBy=auth.user_id,
            createdAt=now,
            lastUpdated=now,
        )
        doc = asset.model_dump(exclude={"id"})
        doc["createdBy"] = creator_id

        result = ctx.assets.insert_one(doc)
        doc["_id"] = result.inserted_id
        response = _to_response(doc, {creator_id: creator})
    except PyMongoError:
        _logger.exception("assets.db_error", op="create")
        raise InternalError()

    _logger.info("assets.created", asset_id=str(result.inserted_id), user_id=auth.user_id)
    return response


@router.get("", response_model=List[AssetResponse])
def list_assets(ctx: AppContext = Depends(get_context)) -> List[AssetResponse]:
    """All assets, most recently updated first. No pagination."""
    try:
        docs = list(ctx.assets.find().sort([("lastUpdated", DESCENDING), ("_id", DESCENDING)]))
        items = _expand(ctx, docs)
    except PyMongoError:
        _logger.exception("assets.db_error", op="list")
        raise InternalError()

    _logger.debug("assets.listed", results=len(items))
    return items


@router.get("/{asset_id}", response_model=AssetResponse)
def get_asset(
    asset_id: str = Path(..., description="Asset ID"),
    ctx: AppContext = Depends(get_context),
) -> AssetResponse:
    """
    Raises:
        NotFound(404): no asset with this id
        InternalError(500): store failure
    """
    oid = _require_oid(asset_id)
    try:
        doc = ctx.assets.find_one({"_id": oid})
        if doc is None:
            raise NotFound("Asset not found")
        return _expand(ctx, [doc])[0]
    except PyMongoError:
        _logger.exception("assets.db_error", op="get", asset_id=asset_id)
        raise InternalError()


@router.put("/{asset_id}", response_model=AssetResponse)
def update_asset(
    request: AssetUpdateRequest,
    asset_id: str = Path(..., description="Asset ID to update"),
    auth: AuthContext = Depends(require_auth_context),
    ctx: AppContext = Depends(get_context),
) -> AssetResponse:
    """
    Merge the fields present in the body into the stored asset.

    Absent keys keep their stored values. An explicit "" or null password
    clears the stored credential; an absent password key leaves it alone.
    lastUpdated is refreshed even when the body is empty.

    Raises:
        ValidationError(400): a sent field fails validation (schema)
        NotFound(404): no asset with this id
        InternalError(500): store failure
    """
    oid = _require_oid(asset_id)
    changes = request.changes()

    try:
        current = ctx.assets.find_one({"_id": oid}, {"lastUpdated": 1})
        if current is None:
            raise NotFound("Asset not found")

        changes["lastUpdated"] = next_timestamp(current.get("lastUpdated"))
        doc = ctx.assets.find_one_and_update(
            {"_id": oid},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            # Deleted between the lookup and the update
            raise NotFound("Asset not found")
        response = _expand(ctx, [doc])[0]
    except PyMongoError:
        _logger.exception("assets.db_error", op="update", asset_id=asset_id)
        raise InternalError()

    _logger.info(
        "assets.updated",
        asset_id=asset_id,
        user_id=auth.user_id,
        fields=sorted(k for k in changes if k != "lastUpdated"),
    )
    return response


@router.delete("/{asset_id}", response_model=AssetDeleteResponse)
def delete_asset(
    asset_id: str = Path(..., description="Asset ID to delete"),
    auth: AuthContext = Depends(require_auth_context),
    ctx: AppContext = Depends(get_context),
) -> AssetDeleteResponse:
    """
    Remove an asset outright. Handoffs referencing it are not touched.

    Raises:
        NotFound(404): no asset with this id
        InternalError(500): store failure
    """
    oid = _require_oid(asset_id)
    try:
        result = ctx.assets.delete_one({"_id": oid})
    except PyMongoError:
        _logger.exception("assets.db_error", op="delete", asset_id=asset_id)
        raise InternalError()

    if result.deleted_count == 0:
        raise NotFound("Asset not found")

    _logger.info("assets.deleted", asset_id=asset_id, user_id=auth.user_id)
    return AssetDeleteResponse()
