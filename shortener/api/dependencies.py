"""
FastAPI dependencies wiring request-scoped services.

The application keeps its settings, database and access control on
app.state; every request gets a RedirectService bound to its own session.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.db.session import Database, get_session
from shortener.services.moderation_store import SQLModerationStore
from shortener.services.redirect_service import RedirectService
from shortener.services.redirect_store import SQLRedirectStore


async def get_redirect_service(
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> RedirectService:
    database: Database = request.app.state.database
    return RedirectService(
        redirects=SQLRedirectStore(session),
        moderation=SQLModerationStore(session, database.adapter),
        config=request.app.state.settings,
    )


def require_admin(request: Request) -> None:
    """
    Guard for privileged endpoints.

    Raises:
        ServiceDisabledError: If no TOKEN is configured
        AuthError: If the Authorization header does not match
    """
    request.app.state.access_control.require(request.headers.get("Authorization"))
