"""
Best-effort side-effect dispatch.

Handlers commit their primary write first and then enqueue emails and push
notifications here. Jobs run on the request's BackgroundTasks after the
response is sent, each with its own retry policy. A job that still fails after
its last attempt is logged and dropped; it never reaches the HTTP caller.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable

from fastapi import BackgroundTasks
from starlette.concurrency import run_in_threadpool

from .config import OUTBOX_MAX_ATTEMPTS, OUTBOX_RETRY_DELAY_SECONDS

logger = logging.getLogger(__name__)


async def run_job(
    name: str,
    func: Callable[..., Any],
    *args: Any,
    max_attempts: int = OUTBOX_MAX_ATTEMPTS,
    retry_delay: float = OUTBOX_RETRY_DELAY_SECONDS,
    **kwargs: Any,
) -> bool:
    """Run one side effect with linear backoff. Returns True on success."""
    attempts = max(1, max_attempts)
    for attempt in range(1, attempts + 1):
        try:
            if inspect.iscoroutinefunction(func):
                await func(*args, **kwargs)
            else:
                await run_in_threadpool(func, *args, **kwargs)
            if attempt > 1:
                logger.info(f"✅ Side effect '{name}' succeeded on attempt {attempt}")
            return True
        except Exception as e:
            if attempt == attempts:
                logger.error(f"❌ Side effect '{name}' failed after {attempts} attempt(s): {e}")
                return False
            logger.warning(f"⚠️ Side effect '{name}' attempt {attempt}/{attempts} failed: {e}")
            if retry_delay > 0:
                await asyncio.sleep(retry_delay * attempt)
    return False


class Outbox:
    """Per-request queue of side effects"""

    def __init__(
        self,
        background_tasks: BackgroundTasks,
        max_attempts: int = OUTBOX_MAX_ATTEMPTS,
        retry_delay: float = OUTBOX_RETRY_DELAY_SECONDS,
    ):
        self.background_tasks = background_tasks
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay

    def enqueue(self, name: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        logger.debug(f"📤 Queued side effect '{name}'")
        self.background_tasks.add_task(
            run_job,
            name,
            func,
            *args,
            max_attempts=self.max_attempts,
            retry_delay=self.retry_delay,
            **kwargs,
        )


def get_outbox(background_tasks: BackgroundTasks) -> Outbox:
    """Dependency injection for Outbox"""
    return Outbox(background_tasks)
