"""Dashboard - Live pipeline view of a root group."""

from groupwatch.dashboard.dashboard import Dashboard
from groupwatch.dashboard.exceptions import (
    DashboardError,
    HierarchyNotLoadedError,
    InvalidFilterError,
)
from groupwatch.dashboard.models import DashboardStats

__all__ = [
    "Dashboard",
    "DashboardError",
    "DashboardStats",
    "HierarchyNotLoadedError",
    "InvalidFilterError",
]
