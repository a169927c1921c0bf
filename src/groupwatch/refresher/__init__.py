"""Refresher - Concurrent pipeline status refresh over the hierarchy tree."""

from groupwatch.refresher.auto import AutoRefresher
from groupwatch.refresher.holder import TreeHolder
from groupwatch.refresher.models import RefreshOutcome
from groupwatch.refresher.refresher import StatusRefresher, apply_error, apply_pipeline

__all__ = [
    "AutoRefresher",
    "RefreshOutcome",
    "StatusRefresher",
    "TreeHolder",
    "apply_error",
    "apply_pipeline",
]
