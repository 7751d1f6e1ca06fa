from typing import Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from loguru import logger

from ..models.oauth import AuthorizationOutcome, AuthorizationRequest
from .clients import ClientRegistry
from .exceptions import (
    InvalidRequest,
    OAuthError,
    UnauthorizedClient,
    UnsupportedResponseType,
)
from .security import TokenCodec


def add_query_params(url: Optional[str], params: Dict[str, Optional[str]]) -> str:
    """Append params to the query string of url, keeping any existing ones"""
    parsed = urlparse(url or "")
    query = parse_qsl(parsed.query, keep_blank_values=True)
    query.extend((k, v) for k, v in params.items() if v is not None)
    return urlunparse(parsed._replace(query=urlencode(query)))


def _error_outcome(request: AuthorizationRequest, exc: OAuthError) -> AuthorizationOutcome:
    # A missing redirect_uri still yields a redirect, to an empty target
    url = add_query_params(request.redirect_uri, {
        "error": exc.error,
        "error_description": exc.error_description,
        "state": request.state or None,
    })
    return AuthorizationOutcome(redirect_url=url, error=exc.error)


def require_absolute_url(url: str):
    """Raise ValueError unless url has a scheme and a host"""
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("redirect_uri is not an absolute URL")


def validate_authorization_request(request: AuthorizationRequest, registry: ClientRegistry):
    """Raise the OAuth error for the first check the request fails"""
    if not request.client_id or not request.response_type or not request.redirect_uri:
        raise InvalidRequest("missing_required_parameters")

    if request.response_type != "code":
        raise UnsupportedResponseType("Only code response type is supported")

    if not registry.is_allowed(request.client_id):
        raise UnauthorizedClient("Client ID is not authorized")


def authorize(
    request: AuthorizationRequest,
    registry: ClientRegistry,
    codec: TokenCodec,
) -> AuthorizationOutcome:
    """
    Handle an authorization request.

    Returns the redirect outcome: the client's redirect_uri carrying either a
    fresh authorization code or an OAuth error, with ``state`` echoed back.
    An unusable redirect_uri on an otherwise valid request, or a failure of
    the codec itself, raises to the caller.
    """
    try:
        validate_authorization_request(request, registry)
    except OAuthError as exc:
        logger.warning(
            f"Authorization request rejected: {exc.error}",
            client_id=request.client_id,
            error_code=exc.error
        )
        return _error_outcome(request, exc)

    # No code goes to a target that cannot be parsed as a URL
    require_absolute_url(request.redirect_uri)

    code = codec.issue_authorization_code(request.client_id, request.redirect_uri)

    logger.info(f"Authorization code issued for client {request.client_id}")

    url = add_query_params(request.redirect_uri, {"code": code, "state": request.state or None})
    return AuthorizationOutcome(redirect_url=url)
