"""Turn object use case results into HTTP responses."""

import functools
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

import structlog
from fastapi import HTTPException, status
from returns.result import Failure, Success

from application.dtos.errors import AppError
from domain.exceptions import InfrastructureError
from interfaces.api.routes.helpers import _map_app_error_to_http_exception

if TYPE_CHECKING:
    from typing import Any

logger = structlog.get_logger()

T_co = TypeVar("T_co")

# client mistakes are routine, anything else means the blob store or index misbehaved
_CLIENT_CATEGORIES = frozenset({"validation", "not_found"})


def _log_failure(failure: AppError, route: str) -> None:
    if failure.category in _CLIENT_CATEGORIES:
        logger.info("use_case_failed", category=failure.category, route=route)
    else:
        logger.warning(
            "use_case_failed",
            category=failure.category,
            message=failure.message,
            route=route,
        )


def _raise_mapped_http_error(failure: AppError) -> None:
    error = _map_app_error_to_http_exception(failure)
    raise error from None


def _raise_unexpected_result_type() -> None:
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    ) from None


def handle_use_case_errors(
    func: Callable[..., Awaitable[T_co]],
) -> Callable[..., Awaitable[T_co]]:
    """Unwrap the ``Result`` returned by an upload, resolve or list route.

    ``Success`` becomes the response body. ``Failure`` is mapped by category to
    400, 404 or 500. Store failures and unexpected exceptions are logged with
    their details but reach the client only as a generic 500.
    """

    @functools.wraps(func)
    async def wrapper(*args: "Any", **kwargs: "Any") -> T_co:  # noqa: ANN401
        try:
            result = await func(*args, **kwargs)

            if isinstance(result, Success):
                return result.unwrap()

            if isinstance(result, Failure):
                failure = result.failure()
                _log_failure(failure, func.__name__)
                _raise_mapped_http_error(failure)

            _raise_unexpected_result_type()

        except HTTPException:
            raise
        except InfrastructureError as exc:
            logger.exception("object_store_unavailable", error=str(exc), route=func.__name__)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Service temporarily unavailable",
            ) from exc
        except Exception as exc:
            logger.exception(
                "unexpected_error",
                error=str(exc),
                error_type=type(exc).__name__,
                route=func.__name__,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error",
            ) from exc

    return wrapper
