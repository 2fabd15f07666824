"""
Result wrapper and best-effort helpers.

`attempt` turns a lookup that may fail (a channel that was deleted, a user the
bot cannot see) into a `Result` the caller has to inspect. `run_fallback_chain`
runs a list of best-effort steps in order, so failure handlers stay flat.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Iterable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of an operation that is allowed to fail"""
    ok: bool
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "Result[T]":
        return cls(ok=False, error=error)

    def unwrap_or(self, default: T) -> T:
        return self.value if self.ok else default

    def __bool__(self) -> bool:
        return self.ok


async def attempt(awaitable: Awaitable[T]) -> Result[T]:
    """Await and capture any exception as a failed Result."""
    try:
        value = await awaitable
    except Exception as e:
        return Result.failure(e)
    if value is None:
        return Result.failure(LookupError("not found"))
    return Result.success(value)


Step = Callable[[], Awaitable[None]]


async def run_fallback_chain(steps: Iterable[Step], description: str = "fallback") -> int:
    """
    Run best-effort steps in order.

    A failing step is logged and the chain continues with the next one.

    Returns:
        Number of steps that completed
    """
    completed = 0
    for index, step in enumerate(steps):
        try:
            await step()
            completed += 1
        except Exception as e:
            logger.warning("%s step %d failed: %s", description, index + 1, e)
    return completed
