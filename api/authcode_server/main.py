from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import time
from loguru import logger

from .core.logging import setup_logging, get_request_logger
from .core.config import CORS_ORIGINS, OAUTH_ROUTE_PREFIX, PORT
from .core.dependencies import get_client_registry
from .core.exceptions import setup_exception_handlers
from .routers import oauth

# Initialize logging
setup_logging()

# Create FastAPI app
app = FastAPI(
    title="Authorization Code OAuth Server",
    description="OAuth 2.0 authorization code grant issuing self-contained signed tokens",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Setup CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup exception handlers
setup_exception_handlers(app)

if not len(get_client_registry()):
    logger.warning("No allowed client ids configured, every authorization request will be rejected")


# Add request processing time middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """
    Middleware to add processing time to response headers
    """
    start_time = time.time()
    request_logger = get_request_logger()

    # Query strings and bodies carry codes and tokens, so only the path is logged
    request_logger.bind(
        client=request.client.host if request.client else "unknown",
        path=request.url.path,
        method=request.method
    ).info(f"Request received: {request.method} {request.url.path}")

    response = await call_next(request)

    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = f"{process_time:.4f} sec"

    request_logger.info(
        f"Response sent: {response.status_code}",
        status_code=response.status_code,
        path=request.url.path,
        method=request.method,
        process_time=f"{process_time:.4f} sec"
    )

    return response


# Include routers
app.include_router(oauth.router)


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint with API info"""
    return {
        "app": "Authorization Code OAuth Server",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "authorize": f"{OAUTH_ROUTE_PREFIX}/authorize",
        "token": f"{OAUTH_ROUTE_PREFIX}/token"
    }


@app.get("/health", tags=["system"])
async def health_check():
    """
    Health check endpoint
    """
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting OAuth server on port {PORT}")

    uvicorn.run(
        "authcode_server.main:app",
        host="0.0.0.0",
        port=PORT,
        log_level="info"
    )
