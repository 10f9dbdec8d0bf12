"""
Decorators for the log-and-return-default error handling used by every
service wrapper.
"""
import functools
import uuid
from typing import Any, Callable, Tuple, Type

from botocore.exceptions import BotoCoreError, ClientError

from logger_config import get_logger

logger = get_logger(__name__)

AWS_ERRORS: Tuple[Type[BaseException], ...] = (ClientError, BotoCoreError)


def describe_error(exc: BaseException) -> str:
    """Render an exception as ``Code: Message`` for client errors."""
    if isinstance(exc, ClientError):
        error = exc.response.get('Error', {})
        code = error.get('Code', 'Unknown')
        message = error.get('Message') or str(exc)
        return f'{code}: {message}'
    return str(exc) or type(exc).__name__


def aws_operation(
    default: Any = False,
    errors: Tuple[Type[BaseException], ...] = AWS_ERRORS,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator for a single SDK call.

    Provides:
    - Correlation IDs on the invocation and failure log lines
    - Logging of the failure instead of propagating it
    - The operation's failure value returned to the caller

    Args:
        default: Value returned when the wrapped call raises one of ``errors``
        errors: Exception types treated as "the remote call failed"

    Returns:
        Decorator applying the pattern to a function
    """
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            correlation_id = str(uuid.uuid4())

            logger.debug(
                f"Operation {func.__qualname__} invoked",
                extra={"correlation_id": correlation_id, "operation": func.__qualname__}
            )

            try:
                return func(*args, **kwargs)
            except errors as e:
                logger.error(
                    f"Operation {func.__qualname__} failed: {describe_error(e)}",
                    extra={
                        "correlation_id": correlation_id,
                        "operation": func.__qualname__,
                        "error_type": type(e).__name__,
                    }
                )
                return default

        return wrapper

    return decorator
