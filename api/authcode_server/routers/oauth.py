from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from loguru import logger

from ..core.authorization import authorize
from ..core.clients import ClientRegistry
from ..core.config import OAUTH_ROUTE_PREFIX
from ..core.dependencies import (
    get_client_registry,
    get_enforce_code_binding,
    get_token_codec,
    get_used_code_store,
)
from ..core.exceptions import InvalidRequest, OAuthError, ServerError, error_response
from ..core.replay import UsedCodeStore
from ..core.security import TokenCodec
from ..core.token_exchange import exchange_authorization_code
from ..models.oauth import AuthorizationRequest, TokenRequest
from ..models.token import ErrorResponse, TokenResponse

router = APIRouter(prefix=OAUTH_ROUTE_PREFIX, tags=["oauth"])


async def read_token_request(request: Request) -> TokenRequest:
    """Parse a token request body, JSON or form encoded"""
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith("application/json"):
        body = await request.json()
    else:
        body = dict(await request.form())

    if not isinstance(body, dict):
        raise InvalidRequest("Invalid request parameters")
    return TokenRequest.model_validate(body)


@router.get(
    "/authorize",
    status_code=status.HTTP_302_FOUND,
    responses={500: {"model": ErrorResponse}},
)
async def authorization_endpoint(
    response_type: Optional[str] = None,
    client_id: Optional[str] = None,
    redirect_uri: Optional[str] = None,
    state: Optional[str] = None,
    registry: ClientRegistry = Depends(get_client_registry),
    codec: TokenCodec = Depends(get_token_codec),
):
    """
    Issue an authorization code and redirect back to the client
    """
    params = AuthorizationRequest(
        response_type=response_type,
        client_id=client_id,
        redirect_uri=redirect_uri,
        state=state
    )

    try:
        outcome = authorize(params, registry, codec)
    except Exception:
        # The redirect target is not trusted once issuance itself failed
        logger.exception(f"Failed to issue authorization code for client {client_id}")
        return error_response(ServerError())

    return RedirectResponse(outcome.redirect_url, status_code=status.HTTP_302_FOUND)


@router.post(
    "/token",
    response_model=TokenResponse,
    responses={400: {"model": ErrorResponse}},
)
async def token_endpoint(
    request: Request,
    codec: TokenCodec = Depends(get_token_codec),
    used_codes: Optional[UsedCodeStore] = Depends(get_used_code_store),
    enforce_code_binding: bool = Depends(get_enforce_code_binding),
):
    """
    Exchange an authorization code for access and refresh tokens
    """
    try:
        token_request = await read_token_request(request)
        return exchange_authorization_code(
            token_request,
            codec,
            used_codes=used_codes,
            enforce_code_binding=enforce_code_binding
        )
    except OAuthError:
        raise
    except Exception as e:
        logger.warning(f"Malformed token request: {type(e).__name__}: {e}")
        raise InvalidRequest("Invalid request parameters") from e
