# core/deps.py
"""
FastAPI dependencies for the acting user and the service container.

There is no login here: the hosting environment authenticates the user and
forwards the identity in a header, which is trusted as-is.
"""
from typing import Annotated

from fastapi import Depends, Header

from core.services import Services, build_services

ACTOR_HEADER = "X-Authenticated-User"
SYSTEM_ACTOR = "system"

_services: Services | None = None


async def get_actor(
    x_authenticated_user: Annotated[str | None, Header(alias=ACTOR_HEADER)] = None,
) -> str:
    """Identity supplied by the host, or `system` when absent."""
    if x_authenticated_user and x_authenticated_user.strip():
        return x_authenticated_user.strip()
    return SYSTEM_ACTOR


def get_services() -> Services:
    """Application-wide services bound to the configured database."""
    global _services
    if _services is None:
        from db import AsyncSessionLocal

        _services = build_services(AsyncSessionLocal)
    return _services


# Type aliases for cleaner endpoint signatures
Actor = Annotated[str, Depends(get_actor)]
ServicesDep = Annotated[Services, Depends(get_services)]
