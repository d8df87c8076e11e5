import functools
import time
import typing as t

import structlog
from django.db import DatabaseError, OperationalError, connection, transaction
from django.http import HttpRequest

from .conf import CoreConfig, get_core_config
from .exceptions import TransactionError

logger = structlog.get_logger(__name__)

P = t.ParamSpec("P")
R = t.TypeVar("R")

RETRYABLE_STORE_ERRORS: tuple[type[Exception], ...] = (OperationalError,)


def get_client_ip(request: HttpRequest) -> str:
    """Extract the client IP address, preferring the first X-Forwarded-For hop."""
    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        return str(x_forwarded_for.split(",")[0].strip())
    return str(request.META.get("REMOTE_ADDR", "unknown"))


def should_retry(error: Exception) -> bool:
    """Whether a store error is transient and the whole write may be replayed.

    Retrying is only safe at the outermost transaction: inside an enclosing atomic block
    the connection is already marked for rollback.
    """
    return isinstance(error, RETRYABLE_STORE_ERRORS) and not connection.in_atomic_block


def retry_on_transient_errors(config: CoreConfig | None = None) -> t.Callable[[t.Callable[P, R]], t.Callable[P, R]]:
    """Retry a callable on transient store errors with linear backoff.

    Business-rule failures and non-transient errors propagate on the first attempt.
    """

    def decorator(fn: t.Callable[P, R]) -> t.Callable[P, R]:
        @functools.wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            cfg = config or get_core_config()
            attempt = 1
            while True:
                try:
                    return fn(*args, **kwargs)
                except RETRYABLE_STORE_ERRORS as e:
                    if attempt >= cfg.transient_retry_attempts or not should_retry(e):
                        raise
                    logger.warning(
                        "transient_store_error_retrying",
                        operation=getattr(fn, "__qualname__", repr(fn)),
                        attempt=attempt,
                        error=str(e),
                    )
                    time.sleep(cfg.transient_retry_backoff * attempt)
                    attempt += 1

        return wrapper

    return decorator


def atomic_write(fn: t.Callable[P, R], *args: P.args, **kwargs: P.kwargs) -> R:
    """Run a multi-row write in one transaction.

    Transient store errors are retried as a whole (see ``retry_on_transient_errors``). Any
    store failure that survives is rolled back and surfaced as a single ``TransactionError``.
    Business errors raised by ``fn`` roll back too and propagate unchanged.

    The engine config is taken from the ``config`` attribute of the bound service when
    ``fn`` is a method, else from the process-wide config.
    """
    config = getattr(getattr(fn, "__self__", None), "config", None)
    operation = getattr(fn, "__qualname__", repr(fn))
    runner = retry_on_transient_errors(config)(transaction.atomic(fn))
    try:
        return runner(*args, **kwargs)
    except DatabaseError as e:
        logger.error("transaction_rolled_back", operation=operation, error=str(e))
        raise TransactionError(reason=e) from e
