from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

# Stamped on every stored asset document; bump when the asset field set changes.
ASSET_SCHEMA_VERSION = 2


# Enums
class UserRole(str, Enum):
    user = "user"
    admin = "admin"


class AssetStatus(str, Enum):
    active = "Active"
    inactive = "Inactive"
    down = "Down"
    maintenance = "Maintenance"
    decommissioned = "Decommissioned"


class AssetDepartment(str, Enum):
    cloud = "Cloud"
    network = "Network"
    voip = "VOIP"


class ProjectStatus(str, Enum):
    not_started = "Not Started"
    in_progress = "In Progress"
    completed = "Completed"
    on_hold = "On Hold"


class TaskStatus(str, Enum):
    todo = "To Do"
    in_progress = "In Progress"
    in_review = "In Review"
    done = "Done"


# Collection documents (camelCase keys as stored)
class User(BaseModel):
    id: Optional[str] = None
    name: str
    email: str
    password: str  # bcrypt hash
    role: UserRole = UserRole.user
    createdAt: datetime

    model_config = {"use_enum_values": True, "validate_default": True}


class Asset(BaseModel):
    id: Optional[str] = None
    name: str
    ipAddress: str
    type: str
    status: AssetStatus = AssetStatus.active
    cloudModel: Optional[str] = None
    provider: Optional[str] = None
    location: Optional[str] = None
    assetDepartment: Optional[AssetDepartment] = None
    username: Optional[str] = None
    password: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    createdBy: str
    createdAt: datetime
    lastUpdated: datetime
    schemaVersion: int = ASSET_SCHEMA_VERSION

    model_config = {"use_enum_values": True, "validate_default": True}


class Project(BaseModel):
    id: Optional[str] = None
    name: str
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.not_started
    owner: str
    members: List[str] = Field(default_factory=list)


class SubTask(BaseModel):
    title: str
    completed: bool = False


class Task(BaseModel):
    id: Optional[str] = None
    project: str
    title: str
    description: Optional[str] = None
    assignee: Optional[str] = None
    dueDate: Optional[datetime] = None
    status: TaskStatus = TaskStatus.todo
    subTasks: List[SubTask] = Field(default_factory=list)


class Handoff(BaseModel):
    id: Optional[str] = None
    fromUser: str
    toUser: str
    summary: str
    relatedAssets: List[str] = Field(default_factory=list)
    relatedTasks: List[str] = Field(default_factory=list)
