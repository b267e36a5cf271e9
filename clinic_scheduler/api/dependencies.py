"""FastAPI dependency injection functions."""
import os
from functools import lru_cache

from fastapi import Header, HTTPException, status

from clinic_scheduler import config
from clinic_scheduler.scheduler import AppointmentScheduler
from clinic_scheduler.state import Actor, Role
from clinic_scheduler.store import AppointmentStore


@lru_cache(maxsize=1)
def get_scheduler() -> AppointmentScheduler:
    """
    Get the scheduling engine (cached singleton).

    Pattern: Create the store's connection pool once, reuse across requests.
    """
    return AppointmentScheduler(
        AppointmentStore(database_url=os.getenv("DATABASE_URL", config.DATABASE_URL))
    )


async def get_actor(
    x_account_id: str = Header(..., description="Acting account id (from the auth layer)"),
    x_account_role: str = Header(..., description="patient or doctor"),
) -> Actor:
    """
    FastAPI dependency resolving the acting account.

    Identity is established upstream; this only reads what the auth layer
    forwarded.

    Raises:
        HTTPException 401: If the account id is empty or the role unknown
    """
    try:
        role = Role(x_account_role.lower())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Unknown account role: {x_account_role}",
        )

    if not x_account_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing account id",
        )

    return Actor(account_id=x_account_id.strip(), role=role)
