import functools
import inspect
import logging
import time

from pyscreenlogic.api_lock import acquire_lock_with_backoff
from pyscreenlogic.exceptions import (GatewayNotConnectedError, GatewayReconnectError,
                                      GatewayUnavailableError, PyScreenLogicException)

log = logging.getLogger('pyscreenlogic')


# Lock Decorator
# Serializes every gateway call made through one client instance
def uses_api_lock(func):
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        with acquire_lock_with_backoff(self.api_lock, self.lock_timeout):
            return func(self, *args, **kwargs)
    return wrapper


# Cache Decorator
# Returns the cached result while it is fresh, otherwise calls the function and caches the result.
# Must run inside uses_api_lock so that concurrent callers see the freshly cached value.
def uses_cache(cache_key):
    def decorator(func):
        sig = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            named_args = sig.bind(self, *args, **kwargs).arguments
            force = named_args.get('force', False)

            # Check Cache
            if not force and self.cache.get(cache_key) is not None:
                if time.perf_counter() < self.cacheexpiry.get(cache_key, 0):
                    log.debug(f"Using Cached {cache_key}")
                    return self.cache[cache_key]

            result = func(self, *args, **kwargs)

            # Update Cache
            if result is not None:
                self.cache[cache_key] = result
                self.cacheexpiry[cache_key] = time.perf_counter() + self.cacheexpire
            return result
        return wrapper
    return decorator


# Invalidate Decorator
# Drops cache entries a write makes stale, whether or not the write succeeded
def invalidates_cache(*cache_keys):
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            try:
                return func(self, *args, **kwargs)
            finally:
                for cache_key in cache_keys:
                    self.cache.pop(cache_key, None)
                    self.cacheexpiry.pop(cache_key, None)
        return wrapper
    return decorator


def _reconnect_gateway(self, func):
    try:
        self.gateway.reconnect()
    except (OSError, PyScreenLogicException) as reconnect_exc:
        log.error(f"{func.__name__}() - reconnect failed: {reconnect_exc}")
        raise GatewayReconnectError(f"Unable to reconnect to gateway: {reconnect_exc}") from reconnect_exc


# Reconnect Decorator
# Network errors (any OSError) reconnect the gateway and retry, once per unit of
# self.reconnect_retries. A session left closed by an earlier failed reconnect is
# reopened first, from the same budget. Protocol errors propagate untouched.
def uses_reconnect(func):
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        retries_left = self.reconnect_retries
        if not self.gateway.is_authenticated():
            if retries_left <= 0:
                log.error(f"{func.__name__}() - gateway session closed, no reconnect attempts allowed")
                raise GatewayUnavailableError(f"{func.__name__}() - gateway session is closed")
            retries_left -= 1
            log.debug(f"{func.__name__}() - gateway session closed, reconnecting")
            _reconnect_gateway(self, func)
        while True:
            try:
                return func(self, *args, **kwargs)
            except OSError as exc:
                if retries_left <= 0:
                    log.error(f"{func.__name__}() - gateway unavailable: {exc}")
                    raise GatewayUnavailableError(
                        f"{func.__name__}() failed after {self.reconnect_retries} reconnect(s): {exc}") from exc
                retries_left -= 1
                # Connection most likely dropped, reconnect
                log.debug(f"{func.__name__}() - reconnect client attempt "
                          f"{self.reconnect_retries - retries_left}: {exc}")
                _reconnect_gateway(self, func)
    return wrapper


# Connection Decorator
# Gateway requests need an authenticated session
def uses_login_required(func):
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        if not self.is_authenticated():
            log.error(f"Not logged in - unable to call {func.__name__}()")
            raise GatewayNotConnectedError(f"{func.__name__}() requires an authenticated gateway session")
        return func(self, *args, **kwargs)
    return wrapper
