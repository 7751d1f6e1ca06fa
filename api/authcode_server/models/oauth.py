from pydantic import BaseModel
from typing import Optional


class AuthorizationRequest(BaseModel):
    """Query parameters of an authorization request"""
    response_type: Optional[str] = None
    client_id: Optional[str] = None
    redirect_uri: Optional[str] = None
    state: Optional[str] = None  # opaque, echoed back unchanged


class TokenRequest(BaseModel):
    """Body of a token request, form or JSON encoded"""
    grant_type: Optional[str] = None
    code: Optional[str] = None
    redirect_uri: Optional[str] = None
    client_id: Optional[str] = None


class AuthorizationOutcome(BaseModel):
    """Where the user agent is sent after an authorization request"""
    redirect_url: str
    error: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.error is None
