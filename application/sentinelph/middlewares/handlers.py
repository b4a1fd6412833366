from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError, HTTPException
from fastapi.responses import JSONResponse
from typing import Any
from sentinelph.config.sentry import capture_exception, add_breadcrumb
from sentinelph.config.settings import SentinelConfigs
from sentinelph.logging.utils import get_app_logger
from sentinelph.middlewares.request_context import request_context

logger = get_app_logger(__name__)
configs = SentinelConfigs()


def error_payload(message: str, **extra) -> dict:
    """JSON error envelope shared by every failure response."""
    payload = {"success": False, "error": message}
    payload.update(extra)
    return payload


async def _validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors as 400 with production-safe messages."""
    request_context.module_name = 'middleware_handlers'
    add_breadcrumb(
        message=f"Validation error on {request.method} {request.url.path}",
        category="validation",
        level="warning",
        data={"errors": exc.errors()}
    )

    if not configs.DEBUG:
        payload = error_payload("Invalid request data")
    else:
        error_messages = []
        for err in exc.errors():
            field_path = " -> ".join(str(loc) for loc in err.get("loc", []) if loc != "body")
            error_messages.append(f"{field_path}: {err.get('msg', 'Invalid input')}")

        if len(error_messages) == 1:
            payload = error_payload(error_messages[0])
        else:
            payload = error_payload("Validation errors", errors=error_messages)

    logger.warning(f"validation_error | method={request.method} url={request.url.path} errors={payload}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=payload)


async def _http_exception_handler(request: Request, exc: Any):
    """Handle HTTP exceptions with production-safe messages."""
    request_context.module_name = 'middleware_handlers'
    status_code = getattr(exc, 'status_code', status.HTTP_500_INTERNAL_SERVER_ERROR)
    detail = getattr(exc, 'detail', str(exc))

    if status_code >= 500:
        logger.error(f"http_exception | method={request.method} url={request.url.path} status_code={status_code} detail={detail}")
        add_breadcrumb(
            message=f"HTTP {status_code} error on {request.method} {request.url.path}",
            category="http",
            level="error",
            data={"status_code": status_code, "detail": detail}
        )
        capture_exception(exc)
    else:
        logger.warning(f"http_exception | method={request.method} url={request.url.path} status_code={status_code} detail={detail}")

    # 4xx details are user-facing messages already
    if not configs.DEBUG and status_code >= 500:
        message = "Something went wrong"
    else:
        message = detail

    return JSONResponse(status_code=status_code, content=error_payload(message), headers=getattr(exc, 'headers', None))


async def _general_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions with production-safe messages."""
    request_context.module_name = 'middleware_handlers'
    logger.error(
        f"unhandled_exception | method={request.method} url={request.url.path} exception_type={type(exc).__name__} exception_message={exc}",
        exc_info=True,
    )
    add_breadcrumb(
        message=f"Unhandled exception on {request.method} {request.url.path}",
        category="exception",
        level="error",
        data={"exception_type": type(exc).__name__, "exception_message": str(exc)}
    )
    capture_exception(exc)

    if not configs.DEBUG:
        payload = error_payload("Internal server error")
    else:
        payload = error_payload(f"Internal server error: {exc}")

    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the given FastAPI instance."""
    from starlette.exceptions import HTTPException as StarletteHTTPException

    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _general_exception_handler)
