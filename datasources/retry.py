"""
Retry decorator for registry connector calls. Transient failures are retried with exponential backoff and every retry is logged against the wrapped call, so flaky registry links show up in the service log before they turn into 502s.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from functools import wraps
from typing import Any, Callable, Iterator, Tuple, Type, TypeVar, cast

F = TypeVar("F", bound=Callable[..., Any])

log = logging.getLogger(__name__)


def backoff_delays(attempts: int, delay: float, backoff: float) -> Iterator[float]:
    """Sleep before each retry: ``attempts - 1`` values growing by ``backoff``."""
    wait = delay
    for _ in range(max(0, attempts - 1)):
        yield wait
        wait *= backoff


def retry(
    *,
    attempts: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
) -> Callable[[F], F]:
    def decorator(func: F) -> F:
        name = getattr(func, "__qualname__", repr(func))

        def _log_retry(n: int, wait: float, exc: Exception) -> None:
            log.warning("%s failed (attempt %d/%d): %s; retrying in %.2fs", name, n, attempts, exc, wait)

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                for n, wait in enumerate(backoff_delays(attempts, delay, backoff), start=1):
                    try:
                        return await func(*args, **kwargs)
                    except exceptions as exc:
                        _log_retry(n, wait, exc)
                    await asyncio.sleep(wait)
                # final attempt propagates whatever it raises
                return await func(*args, **kwargs)

            return cast(F, async_wrapper)

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            for n, wait in enumerate(backoff_delays(attempts, delay, backoff), start=1):
                try:
                    return func(*args, **kwargs)
                except exceptions as exc:
                    _log_retry(n, wait, exc)
                time.sleep(wait)
            return func(*args, **kwargs)

        return cast(F, sync_wrapper)

    return decorator
