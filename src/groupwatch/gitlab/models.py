"""Data models for GitLab API resources."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class PipelineStatus(StrEnum):
    """GitLab pipeline status."""

    CREATED = "created"
    WAITING_FOR_RESOURCE = "waiting_for_resource"
    PREPARING = "preparing"
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    CANCELED = "canceled"
    SKIPPED = "skipped"
    MANUAL = "manual"
    SCHEDULED = "scheduled"


# Statuses of pipelines that have not finished yet
ACTIVE_STATUSES = frozenset(
    {
        PipelineStatus.CREATED,
        PipelineStatus.WAITING_FOR_RESOURCE,
        PipelineStatus.PREPARING,
        PipelineStatus.PENDING,
        PipelineStatus.RUNNING,
    }
)


@dataclass(frozen=True)
class Group:
    """A GitLab group or subgroup."""

    id: int
    name: str
    full_path: str
    description: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Group:
        return cls(
            id=int(data["id"]),
            name=data["name"],
            full_path=data["full_path"],
            description=data.get("description"),
        )


@dataclass(frozen=True)
class Project:
    """A GitLab project."""

    id: int
    name: str
    path_with_namespace: str
    web_url: str
    description: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Project:
        return cls(
            id=int(data["id"]),
            name=data["name"],
            path_with_namespace=data["path_with_namespace"],
            web_url=data["web_url"],
            description=data.get("description"),
        )


@dataclass(frozen=True)
class Pipeline:
    """Snapshot of a single pipeline run.

    Timestamps are kept as the ISO 8601 strings returned by the API.
    """

    id: int
    project_id: int
    status: PipelineStatus
    ref: str
    sha: str
    web_url: str
    created_at: str
    updated_at: str
    started_at: str | None = None
    finished_at: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Pipeline:
        return cls(
            id=int(data["id"]),
            project_id=int(data["project_id"]),
            status=PipelineStatus(data["status"]),
            ref=data["ref"],
            sha=data["sha"],
            web_url=data["web_url"],
            created_at=data["created_at"],
            updated_at=data["updated_at"],
            started_at=data.get("started_at"),
            finished_at=data.get("finished_at"),
        )
