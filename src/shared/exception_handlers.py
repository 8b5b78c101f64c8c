from typing import Any, Callable, Coroutine

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from starlette.responses import Response

from shared.exceptions import CheckoutIncompleteError, MarketplaceError

ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]

logger = structlog.get_logger(__name__)


async def marketplace_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, MarketplaceError) else MarketplaceError(str(exc))
    if error.status_code >= 500:
        logger.error("Marketplace error", error=error.message, path=request.url.path)
    content: dict[str, Any] = {"detail": error.message}
    if isinstance(error, CheckoutIncompleteError):
        content["created_order_ids"] = error.created_order_ids
        content["failed_seller_ids"] = error.failed_seller_ids
    return JSONResponse(status_code=error.status_code, content=content)


async def protean_validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    messages = exc.messages if isinstance(exc, ValidationError) else {"error": [str(exc)]}
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": messages},
    )


async def not_found_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Not found"})


EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    MarketplaceError: marketplace_error_handler,
    ValidationError: protean_validation_error_handler,
    ObjectNotFoundError: not_found_error_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
