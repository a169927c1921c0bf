"""Custom exceptions for the Dashboard."""


class DashboardError(Exception):
    """Base exception for Dashboard errors."""


class HierarchyNotLoadedError(DashboardError):
    """The hierarchy has not been loaded yet."""


class InvalidFilterError(DashboardError):
    """A filter value is not recognized."""
