"""Shared API dependencies for context injection and the ban gate."""

from typing import Annotated

from fastapi import Depends, Request

from cornchan.core.context import AppContext


def get_context(request: Request) -> AppContext:
    """Return the application context built at startup."""
    return request.app.state.context


# Type alias for application context dependency
ContextDep = Annotated[AppContext, Depends(get_context)]


def client_address(request: Request) -> str:
    """Return the textual IP address of the caller."""
    if request.client is None:
        return ""
    return request.client.host


async def enforce_ban(
    context: ContextDep,
    address: Annotated[str, Depends(client_address)],
) -> None:
    """Reject the request before the handler runs if the caller is banned.

    Raises:
        Forbidden: If the caller's address has an active ban.
    """
    await context.bans.enforce(address)
