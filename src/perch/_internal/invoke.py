"""Call a sync or async route handler uniformly.

Handlers can be ``def`` or ``async def``. Sync handlers are pushed to
a worker thread so a blocking outbound call (e.g. fetching from a data
source) does not stall the event loop for other requests.

Usage::

    from perch._internal.invoke import invoke

    result = await invoke(handler, request)
"""

import functools
import inspect
from typing import Any

import anyio.to_thread


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *handler* and await its result.

    Coroutine functions are awaited directly. Plain callables run via
    ``anyio.to_thread.run_sync``; if they hand back an awaitable anyway
    (e.g. a lambda returning a coroutine), that is awaited too.
    """
    if inspect.iscoroutinefunction(handler) or inspect.iscoroutinefunction(
        getattr(handler, "__call__", None)
    ):
        return await handler(*args, **kwargs)

    result = await anyio.to_thread.run_sync(functools.partial(handler, *args, **kwargs))
    if inspect.isawaitable(result):
        result = await result
    return result
