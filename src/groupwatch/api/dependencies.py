"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends

from groupwatch.api.session import AppSession
from groupwatch.dashboard import Dashboard

# Global AppSession instance (initialized on app startup)
_session: AppSession | None = None


def init_session(session: AppSession) -> AppSession:
    """Initialize the global AppSession instance."""
    global _session  # noqa: PLW0603
    _session = session
    return _session


async def close_session() -> None:
    """Close the global AppSession instance."""
    global _session  # noqa: PLW0603
    if _session is not None:
        await _session.close()
        _session = None


def get_session() -> Generator[AppSession, None, None]:
    """Dependency that provides the AppSession instance."""
    if _session is None:
        raise RuntimeError("AppSession not initialized. Call init_session() first.")
    yield _session


# Type alias for dependency injection
SessionDep = Annotated[AppSession, Depends(get_session)]


async def get_dashboard(session: SessionDep) -> Dashboard:
    """Dependency that provides the Dashboard of the configured root group."""
    return session.dashboard()


DashboardDep = Annotated[Dashboard, Depends(get_dashboard)]
