"""
Deadline helpers for remote calls.

A call that misses its deadline is abandoned: the caller gets the timeout
error, and whatever the underlying call eventually returns is ignored.
"""

import asyncio
import functools
from typing import Any, Awaitable, Callable, Optional, Type, TypeVar

from promptdeck.agents.generation.exceptions import GenerationError

T = TypeVar("T")


async def await_with_deadline(
    awaitable: Awaitable[T],
    seconds: float,
    timeout_error: Type[GenerationError],
    description: str = "operation",
    context: Optional[dict] = None,
) -> T:
    """Await ``awaitable`` for at most ``seconds``; raise ``timeout_error`` otherwise."""
    try:
        return await asyncio.wait_for(awaitable, timeout=seconds)
    except asyncio.TimeoutError as e:
        raise timeout_error(
            f"{description} timed out after {seconds:g}s",
            cause=e,
            context=context,
        )


async def run_blocking_with_deadline(
    fn: Callable[..., T],
    *args: Any,
    seconds: float,
    timeout_error: Type[GenerationError],
    description: str = "operation",
    **kwargs: Any,
) -> T:
    """Run a blocking SDK call in the default executor under a deadline.

    The worker thread cannot be cancelled; on timeout its result is dropped.
    """
    loop = asyncio.get_running_loop()
    future = loop.run_in_executor(None, functools.partial(fn, *args, **kwargs))
    return await await_with_deadline(future, seconds, timeout_error, description)
