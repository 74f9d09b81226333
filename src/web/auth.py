"""
Principal resolution.

The sign-in flow is handled elsewhere; by the time a request reaches the API
the authenticated user id (if any) is stored in the signed session cookie.
"""
from typing import Optional, Protocol

from fastapi import Request

SESSION_USER_KEY = "user_id"


class PrincipalResolver(Protocol):
    async def resolve(self, request: Request) -> Optional[str]:
        ...


class SessionPrincipalResolver:
    """Read the verified user id from the session."""

    async def resolve(self, request: Request) -> Optional[str]:
        user_id = request.session.get(SESSION_USER_KEY)
        if isinstance(user_id, str) and user_id.strip():
            return user_id
        return None
