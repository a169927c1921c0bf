"""Data models for the Scanner module."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ScanRecord:
    """Project IDs discovered below a root group.

    Attributes:
        root_group_id: The root group the scan started from.
        project_ids: IDs of every project found.
        last_scan: ISO 8601 timestamp of the scan.
    """

    root_group_id: str
    project_ids: list[int] = field(default_factory=list)
    last_scan: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "projectIds": self.project_ids,
            "lastScan": self.last_scan,
            "rootGroupId": self.root_group_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScanRecord:
        return cls(
            root_group_id=str(data["rootGroupId"]),
            project_ids=[int(pid) for pid in data["projectIds"]],
            last_scan=data.get("lastScan", ""),
        )


@dataclass
class ScanInfo:
    """Summary of the most recent scan."""

    last_scan: str
    project_count: int
