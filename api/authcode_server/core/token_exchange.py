from typing import Optional

from loguru import logger

from ..models.oauth import TokenRequest
from ..models.token import TokenResponse
from .exceptions import InvalidGrant, InvalidRequest, UnsupportedGrantType
from .replay import UsedCodeStore
from .security import TokenCodec


def exchange_authorization_code(
    request: TokenRequest,
    codec: TokenCodec,
    used_codes: Optional[UsedCodeStore] = None,
    enforce_code_binding: bool = False,
) -> TokenResponse:
    """
    Exchange an authorization code for an access token and a refresh token.

    ``expires_in`` reports the remaining lifetime of the exchanged code, not
    of the new access token. The new tokens are bound to the client_id and
    redirect_uri of the request. With ``enforce_code_binding`` those must
    match the code's claims; with ``used_codes`` each code can be exchanged
    only once.
    """
    if request.grant_type != "authorization_code":
        raise UnsupportedGrantType("Only authorization_code grant type is supported")

    claims = codec.verify(request.code)
    if claims is None:
        logger.warning("Token request with invalid authorization code", client_id=request.client_id)
        raise InvalidGrant("Invalid authorization code")

    if enforce_code_binding and (
        claims.client_id != request.client_id or claims.redirect_uri != request.redirect_uri
    ):
        logger.warning(
            "Authorization code presented by a different client or redirect_uri",
            client_id=request.client_id,
            code_client_id=claims.client_id
        )
        raise InvalidGrant("Invalid authorization code")

    if not request.client_id or not request.redirect_uri:
        raise InvalidRequest("Invalid request parameters")

    if used_codes is not None and used_codes.mark_used(claims.token_id, claims.expires_at):
        logger.warning("Authorization code replayed", client_id=claims.client_id)
        raise InvalidGrant("Invalid authorization code")

    expires_in = claims.expires_at - codec.now()

    access_token = codec.issue_access_token(request.client_id, request.redirect_uri)
    refresh_token = codec.issue_refresh_token(request.client_id, request.redirect_uri)

    logger.info("Tokens issued", client_id=request.client_id, expires_in=expires_in)

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=expires_in,
        refresh_token=refresh_token
    )
