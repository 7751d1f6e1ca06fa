import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str = "") -> list:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


# Clients permitted to start the authorization flow
ALLOWED_CLIENT_IDS = _env_list("OAUTH_ALLOWED_CLIENT_IDS")

OAUTH_ROUTE_PREFIX = os.getenv("OAUTH_ROUTE_PREFIX", "/api/oauth").rstrip("/")

# Token lifetimes per token class
AUTHORIZATION_CODE_LIFETIME = timedelta(minutes=10)
ACCESS_TOKEN_LIFETIME = timedelta(hours=1)
REFRESH_TOKEN_LIFETIME = timedelta(days=1)

# Optional hardening of the code exchange, both off to keep the stateless behaviour
ENFORCE_CODE_BINDING = _env_bool("OAUTH_ENFORCE_CODE_BINDING")
SINGLE_USE_CODES = _env_bool("OAUTH_SINGLE_USE_CODES")

CORS_ORIGINS = _env_list("CORS_ORIGINS", "*")

PORT = int(os.getenv("PORT", "8080"))

# Log configurations
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv(
    "LOG_FORMAT",
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name}:{function}:{line} - {message}"
)
LOG_FILE = os.getenv("LOG_FILE")
LOG_JSON = _env_bool("LOG_JSON")
