import functools
import inspect
import logging
from typing import Any, Callable

from fastapi import Request

from faceyoga.core.cache import cache
from faceyoga.core.config import settings

logger = logging.getLogger(__name__)

_SKIP_KWARGS = {"db", "session", "request"}


def cache_endpoint(key_prefix: str, ttl: int = 300):
    """Cache the JSON body of a public async endpoint under ``key_prefix``.

    Only use on endpoints whose output does not depend on the caller.
    """
    def decorator(func: Callable) -> Callable:
        if not inspect.iscoroutinefunction(func):
            raise TypeError("cache_endpoint only supports async endpoints")

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            if not settings.CACHE_ENABLED:
                return await func(*args, **kwargs)

            cache_key = _generate_cache_key(key_prefix, kwargs)
            request = kwargs.get("request")

            cached_value = await cache.get(cache_key)
            if cached_value is not None:
                if isinstance(request, Request):
                    request.state.cache_status = "HIT"
                logger.debug(f"Cache HIT for key: {cache_key}")
                return cached_value

            result = await func(*args, **kwargs)
            if result is not None:
                await cache.set(cache_key, _to_cacheable(result), ttl=ttl)
                if isinstance(request, Request):
                    request.state.cache_status = "MISS"
                logger.debug(f"Cache MISS for key: {cache_key} (stored with TTL {ttl}s)")
            return result

        return wrapper

    return decorator


def _to_cacheable(result: Any) -> Any:
    if hasattr(result, "model_dump"):
        return result.model_dump(mode="json")
    return result


def _generate_cache_key(prefix: str, kwargs: dict) -> str:
    key_parts = [prefix]
    for k, v in sorted(kwargs.items()):
        if k in _SKIP_KWARGS or callable(v):
            continue
        key_parts.append(f"{k}={v}")
    return ":".join(key_parts)
