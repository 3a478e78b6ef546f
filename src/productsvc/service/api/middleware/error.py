"""
Error handling middleware.

Provides consistent error responses and request ID tracking.
"""

import uuid
from typing import Callable

from aiohttp import web

from productsvc.service.api.errors import APIError, ErrorCode
from productsvc.utils.logging import get_logger

logger = get_logger("productsvc.api.middleware.error")


@web.middleware
async def error_middleware(request: web.Request, handler: Callable) -> web.StreamResponse:
    """
    Middleware for consistent error handling.

    - Adds request_id to all requests
    - Catches APIError and returns structured JSON response
    - Catches unexpected errors and returns generic 500
    - Logs all errors with context
    """
    request_id = f"req_{uuid.uuid4().hex[:12]}"
    request["request_id"] = request_id

    try:
        response = await handler(request)
        response.headers["X-Request-ID"] = request_id
        return response

    except APIError as e:
        logger.warning(
            f"API error: {e.code.value} - {e.message}",
            extra={
                "request_id": request_id,
                "error_code": e.code.value,
                "status": e.status,
                "path": request.path,
                "method": request.method,
            },
        )
        return web.json_response(
            e.to_dict(request_id),
            status=e.status,
            headers={"X-Request-ID": request_id},
        )

    except web.HTTPException:
        # Let aiohttp handle its own HTTP exceptions
        raise

    except Exception as e:
        logger.error(
            f"Unexpected error: {e}",
            extra={
                "request_id": request_id,
                "path": request.path,
                "method": request.method,
            },
            exc_info=True,
        )
        return web.json_response(
            {
                "error": {
                    "code": ErrorCode.INTERNAL_ERROR.value,
                    "message": "An internal error occurred",
                    "request_id": request_id,
                }
            },
            status=500,
            headers={"X-Request-ID": request_id},
        )
