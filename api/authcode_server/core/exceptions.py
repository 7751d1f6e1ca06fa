from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from loguru import logger
from uuid import uuid4
import traceback

from ..models.token import ErrorResponse


class OAuthError(Exception):
    """Base exception for OAuth 2.0 protocol errors"""
    error = "invalid_request"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, error_description: str = None):
        super().__init__(error_description or self.error)
        self.error_description = error_description

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.error, error_description=self.error_description)


class InvalidRequest(OAuthError):
    """Missing or structurally invalid parameters"""
    error = "invalid_request"


class UnsupportedResponseType(OAuthError):
    """Authorization request asked for something other than a code"""
    error = "unsupported_response_type"


class UnauthorizedClient(OAuthError):
    """Client id is not in the registry"""
    error = "unauthorized_client"


class UnsupportedGrantType(OAuthError):
    """Token request used a grant other than authorization_code"""
    error = "unsupported_grant_type"


class InvalidGrant(OAuthError):
    """Authorization code failed verification"""
    error = "invalid_grant"


class ServerError(OAuthError):
    """Unexpected internal failure"""
    error = "server_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(exc: OAuthError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(exclude_none=True)
    )


def setup_exception_handlers(app: FastAPI):
    """Register exception handlers with the FastAPI app"""

    @app.exception_handler(OAuthError)
    async def oauth_exception_handler(request: Request, exc: OAuthError):
        """Handler for OAuth protocol errors"""
        error_id = str(uuid4())
        logger.warning(
            f"OAuth error: {exc.error}",
            error_id=error_id,
            status_code=exc.status_code,
            error_code=exc.error,
            path=request.url.path
        )

        return error_response(exc)

    # Covers any route declaring typed query, path or body parameters
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handler for request validation errors"""
        error_id = str(uuid4())

        logger.error(
            "Request validation error",
            error_id=error_id,
            errors=exc.errors(),
            path=request.url.path
        )

        return error_response(InvalidRequest("Invalid request parameters"))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Handler for all other exceptions"""
        error_id = str(uuid4())

        logger.bind(
            error_id=error_id,
            error_type=type(exc).__name__,
            path=request.url.path,
            traceback=traceback.format_exc()
        ).error(f"Unhandled exception: {str(exc)}")

        return error_response(ServerError())
