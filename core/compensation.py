# core/compensation.py
"""
Two-step writes with a manual undo.

Both workflows commit a record first and then mutate the asset. When the
second step fails the first one is reversed and the original error is
surfaced to the caller.
"""
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError

from core.errors import AssetTrackerError, DependencyError
from core.logging import get_logger

logger = get_logger("compensation")

T = TypeVar("T")
U = TypeVar("U")


async def run_compensated(
    action: Callable[[], Awaitable[T]],
    follow_up: Callable[[T], Awaitable[U]],
    compensate: Callable[[T], Awaitable[object]],
    *,
    operation: str,
) -> tuple[T, U]:
    """
    Run ``action``, then ``follow_up(result)``; undo with ``compensate``.

    Errors from ``action`` propagate untouched (nothing to undo). If
    ``follow_up`` raises, ``compensate`` runs before the error is re-raised.
    Domain errors keep their kind; anything else becomes DependencyError.
    A failing compensation is logged and reported as DependencyError since
    the store is left holding the first write.
    """
    first = await action()
    try:
        second = await follow_up(first)
    except (AssetTrackerError, SQLAlchemyError) as exc:
        logger.warning(
            "compensating_rollback",
            extra={"operation": operation, "error": str(exc)},
        )
        try:
            await compensate(first)
        except Exception as undo_exc:
            logger.exception(
                "compensation_failed",
                extra={"operation": operation},
            )
            raise DependencyError(
                f"{operation} failed and could not be rolled back: {exc}"
            ) from undo_exc
        if isinstance(exc, AssetTrackerError):
            raise
        raise DependencyError(f"{operation} failed: {exc}") from exc
    return first, second
