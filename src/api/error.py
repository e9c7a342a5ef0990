"""HTTP error mapping

Use cases return ``Error`` values; routes raise ``ClientError`` which the
handlers registered in create_app render as ``{"error": {...}}``.
"""

import logging
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from libs.result import Error

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_EXPIRED": status.HTTP_401_UNAUTHORIZED,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "INSUFFICIENT_BALANCE": status.HTTP_402_PAYMENT_REQUIRED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "EMAIL_NOT_VERIFIED": status.HTTP_403_FORBIDDEN,
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ACCOUNT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "PAYMENT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "USAGE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "GENERATION_BLOCKED": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "GENERATION_QUOTA_EXCEEDED": status.HTTP_429_TOO_MANY_REQUESTS,
    "GENERATION_FAILED": status.HTTP_502_BAD_GATEWAY,
    "INTERNAL_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "RECONCILIATION_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ClientError(Exception):
    """
    Raised by routes to return an error response

    The status code defaults to the one registered for the error code,
    then to 400.
    """

    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST)

    def to_body(self) -> dict:
        body = {"code": self.error.code, "message": self.error.message}
        if self.error.details:
            body["details"] = self.error.details
        return {"error": body}


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} -> {exc.error.code}: {exc.error.reason or exc.error.message}"
        )
    elif exc.error.reason:
        logger.info(f"{request.method} {request.url.path} -> {exc.error.code}: {exc.error.reason}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"), "message": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request parameters",
                "details": {"errors": errors},
            }
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": {"code": "INTERNAL_ERROR", "message": "Internal server error"}},
    )


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
