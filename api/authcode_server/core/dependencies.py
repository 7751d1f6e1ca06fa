from typing import Optional

from .clients import ClientRegistry
from .config import ALLOWED_CLIENT_IDS, ENFORCE_CODE_BINDING, SINGLE_USE_CODES
from .replay import InMemoryUsedCodeStore, UsedCodeStore
from .security import TokenCodec

# Process-wide state, created once at import and read-only afterwards
_token_codec = TokenCodec()
_client_registry = ClientRegistry(ALLOWED_CLIENT_IDS)
_used_code_store = InMemoryUsedCodeStore() if SINGLE_USE_CODES else None


def get_token_codec() -> TokenCodec:
    """
    Get the codec holding this process's signing key
    """
    return _token_codec


def get_client_registry() -> ClientRegistry:
    """
    Get the allow-list of client ids
    """
    return _client_registry


def get_used_code_store() -> Optional[UsedCodeStore]:
    """
    Get the single-use marker store, or None when codes are not tracked
    """
    return _used_code_store


def get_enforce_code_binding() -> bool:
    """
    Whether a code may only be exchanged by the client and redirect_uri it was issued to
    """
    return ENFORCE_CODE_BINDING
