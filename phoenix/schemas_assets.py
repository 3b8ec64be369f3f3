"""
phoenix/schemas_assets.py

Pydantic schemas for the asset resource.

Create and update bodies are validated before any handler logic runs.
AssetUpdateRequest is a partial schema: the handler writes only the keys the
client actually sent (model_dump(exclude_unset=True)), so an omitted field
keeps its stored value.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from phoenix.models import AssetDepartment, AssetStatus


def _strip_required(v, field_name: str):
    if v is None:
        raise ValueError(f"{field_name} must not be null")
    if isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError(f"{field_name} must not be empty")
    return v


def _clean_tags(v):
    """Drop blanks and duplicates, keep first-seen order. null means no tags."""
    if v is None:
        return []
    if not isinstance(v, list):
        return v
    seen = []
    for tag in v:
        if isinstance(tag, str):
            tag = tag.strip()
            if not tag or tag in seen:
                continue
        seen.append(tag)
    return seen


class AssetCreateRequest(BaseModel):
    """Request schema for creating an asset. name, ipAddress and type are required."""
    name: str = Field(..., max_length=200)
    ipAddress: str = Field(..., max_length=100)
    type: str = Field(..., max_length=100)
    status: AssetStatus = AssetStatus.active
    cloudModel: Optional[str] = Field(None, max_length=200)
    provider: Optional[str] = Field(None, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    assetDepartment: Optional[AssetDepartment] = None
    username: Optional[str] = Field(None, max_length=200)
    password: Optional[str] = Field(None, max_length=500)
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = Field(None, max_length=10000)

    @field_validator("name", "ipAddress", "type", mode="before")
    @classmethod
    def required_not_blank(cls, v, info):
        return _strip_required(v, info.field_name)

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v):
        return _clean_tags(v)


class AssetUpdateRequest(BaseModel):
    """
    Partial update. Every field is optional; absent keys are left untouched.

    password: an explicit "" or null clears the stored credential.
    """
    name: Optional[str] = Field(None, max_length=200)
    ipAddress: Optional[str] = Field(None, max_length=100)
    type: Optional[str] = Field(None, max_length=100)
    status: Optional[AssetStatus] = None
    cloudModel: Optional[str] = Field(None, max_length=200)
    provider: Optional[str] = Field(None, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    assetDepartment: Optional[AssetDepartment] = None
    username: Optional[str] = Field(None, max_length=200)
    password: Optional[str] = Field(None, max_length=500)
    tags: Optional[List[str]] = None
    notes: Optional[str] = Field(None, max_length=10000)

    # Validators only run for keys present in the body
    @field_validator("name", "ipAddress", "type", "status", mode="before")
    @classmethod
    def not_null_when_sent(cls, v, info):
        return _strip_required(v, info.field_name)

    @field_validator("password")
    @classmethod
    def empty_password_clears(cls, v):
        return v or None

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v):
        return _clean_tags(v)

    def changes(self) -> dict:
        """Fields the client sent, ready for a $set."""
        return self.model_dump(exclude_unset=True, mode="json")


class CreatorSummary(BaseModel):
    id: str = Field(..., alias="_id")
    name: str
    email: str

    model_config = {"populate_by_name": True}


class AssetResponse(BaseModel):
    """Asset as returned to clients. createdBy is expanded to name/email only."""
    id: str = Field(..., alias="_id")
    name: str
    ipAddress: str
    type: str
    status: AssetStatus
    cloudModel: Optional[str] = None
    provider: Optional[str] = None
    location: Optional[str] = None
    assetDepartment: Optional[AssetDepartment] = None
    username: Optional[str] = None
    password: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    createdBy: Optional[CreatorSummary] = None
    createdAt: Optional[datetime] = None
    lastUpdated: datetime
    schemaVersion: int = 1  # documents written before versioning

    model_config = {"populate_by_name": True, "extra": "ignore"}


class AssetDeleteResponse(BaseModel):
    msg: str = "Asset removed"
