from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class TokenClaims(BaseModel):
    """Model for data stored in every signed token"""
    model_config = ConfigDict(populate_by_name=True)

    client_id: str
    redirect_uri: str
    token_id: str = Field(alias="jti")
    issued_at: int = Field(alias="iat")
    expires_at: int = Field(alias="exp")


class TokenResponse(BaseModel):
    """Model for a successful token endpoint response"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    refresh_token: str


class ErrorResponse(BaseModel):
    """Model for an OAuth 2.0 error response"""
    error: str
    error_description: Optional[str] = None
