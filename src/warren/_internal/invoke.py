"""Call sync or async callables uniformly.

Handler operations and error handlers can be ``def`` or ``async def``;
the dispatcher awaits through this single helper so the check lives in
one place::

    result = await invoke(instance.show, request, response, id="42")
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result when it is awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
