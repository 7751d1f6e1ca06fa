import pytest
import string
from fastapi.testclient import TestClient

from authcode_server.main import app
from authcode_server.core.clients import ClientRegistry
from authcode_server.core.dependencies import (
    get_client_registry,
    get_enforce_code_binding,
    get_token_codec,
    get_used_code_store,
)
from authcode_server.core.security import TokenCodec

TEST_CLIENT_ID = "test-client"
OTHER_CLIENT_ID = "other-client"
REDIRECT_URI = "https://app.example/cb"
START_TIME = 1_700_000_000
B64URL_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "-_"


class FakeClock:
    """Manually advanced clock for expiry tests"""

    def __init__(self, now=START_TIME):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class CountingCodec:
    """Wraps a codec and records how many tokens it minted"""

    def __init__(self, codec):
        self.codec = codec
        self.minted = 0

    def __getattr__(self, name):
        return getattr(self.codec, name)

    def issue_authorization_code(self, client_id, redirect_uri):
        self.minted += 1
        return self.codec.issue_authorization_code(client_id, redirect_uri)

    def issue_access_token(self, client_id, redirect_uri):
        self.minted += 1
        return self.codec.issue_access_token(client_id, redirect_uri)

    def issue_refresh_token(self, client_id, redirect_uri):
        self.minted += 1
        return self.codec.issue_refresh_token(client_id, redirect_uri)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def codec(clock):
    return TokenCodec(clock=clock)


@pytest.fixture
def counting_codec(codec):
    """Same signing key as codec, but counts every token it mints"""
    return CountingCodec(codec)


@pytest.fixture
def registry():
    return ClientRegistry([TEST_CLIENT_ID, OTHER_CLIENT_ID])


@pytest.fixture
def used_code_store():
    """No replay tracking unless a test opts in"""
    return None


@pytest.fixture
def enforce_code_binding():
    return False


@pytest.fixture
def client(codec, registry, used_code_store, enforce_code_binding):
    """Test client for FastAPI app"""
    app.dependency_overrides[get_token_codec] = lambda: codec
    app.dependency_overrides[get_client_registry] = lambda: registry
    app.dependency_overrides[get_used_code_store] = lambda: used_code_store
    app.dependency_overrides[get_enforce_code_binding] = lambda: enforce_code_binding
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def authorization_code(codec):
    """A fresh authorization code for the test client"""
    return codec.issue_authorization_code(TEST_CLIENT_ID, REDIRECT_URI)


@pytest.fixture
def reencode():
    """Respell a token by flipping the unused low bits of its last base64url character"""
    def _reencode(token):
        last = B64URL_ALPHABET.index(token[-1])
        return token[:-1] + B64URL_ALPHABET[last ^ 1]
    return _reencode
