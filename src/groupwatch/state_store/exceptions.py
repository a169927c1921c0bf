"""Custom exceptions for State Store."""


class StateStoreError(Exception):
    """Base exception for State Store errors."""


class InvalidKeyError(StateStoreError):
    """Key is empty or too long."""
