import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

import httpx

from faceyoga.client.errors import ApiError, NotAuthenticatedError
from faceyoga.client.session import AuthSessionProvider
from faceyoga.core.config import settings
from faceyoga.schemas.auth import AuthSession

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


def is_retryable(error: Exception) -> bool:
    if isinstance(error, httpx.TransportError):
        return True
    if isinstance(error, ApiError):
        return error.retryable
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code >= 500
    return False


async def retry_operation(
    operation: Callable[[AuthSession], Awaitable[T]],
    provider: AuthSessionProvider,
    *,
    max_retries: Optional[int] = None,
    base_delay: Optional[float] = None,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """Run ``operation`` with the current session, retrying transient failures.

    Fails at once with ``NotAuthenticatedError`` when there is no session. After
    the first attempt, up to ``max_retries`` retries follow with delays of
    ``base_delay``, ``2 * base_delay``, ``4 * base_delay``... Client errors (4xx)
    are raised immediately.
    """
    max_retries = settings.RETRY_MAX_RETRIES if max_retries is None else max_retries
    base_delay = settings.RETRY_BASE_DELAY_SECONDS if base_delay is None else base_delay

    attempt = 0
    while True:
        session = provider.get_session()
        if session is None:
            raise NotAuthenticatedError()
        try:
            return await operation(session)
        except Exception as e:
            if not is_retryable(e) or attempt >= max_retries:
                raise
            delay = base_delay * (2 ** attempt)
            attempt += 1
            logger.warning(f"retry({attempt}/{max_retries}) after {type(e).__name__}: {e} (sleep={delay:.2f}s)")
            await sleep(delay)
